from fastapi import Request

from engine.monitoring import GeneratorMonitor


def get_monitor(request: Request) -> GeneratorMonitor:
    return request.app.state.monitor
