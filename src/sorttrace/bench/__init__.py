"""
Trace reporting tools.

    sorttrace.bench.measure  -> time_trace_call
    sorttrace.bench.runner   -> run_experiment, main (the `sorttrace-report` CLI)
"""
