"""Entry point for probing: binds settings, the socket registry and the query collaborators."""
from typing import Optional

from .bedrock import probe_bedrock
from .config import Settings
from .detect import auto_detect
from .java import measure_tcp_latency, probe_java
from .queries import query_bedrock_status, query_java_status
from .registry import SocketRegistry
from .results import ProbeTarget


class StatusProber:
    def __init__(self, settings: Optional[Settings] = None, registry: Optional[SocketRegistry] = None,
                 java_query=query_java_status, bedrock_query=query_bedrock_status,
                 tcp_connect=measure_tcp_latency):
        self.settings = settings or Settings()
        self.registry = registry if registry is not None else SocketRegistry()
        self.java_query = java_query
        self.bedrock_query = bedrock_query
        self.tcp_connect = tcp_connect

    async def java(self, target: ProbeTarget):
        return await probe_java(target, self.settings, query=self.java_query, connect=self.tcp_connect)

    async def bedrock(self, target: ProbeTarget):
        return await probe_bedrock(target, self.settings, registry=self.registry, query=self.bedrock_query)

    async def auto_detect(self, host: str, java_port: int, bedrock_port: int):
        return await auto_detect(
            self.java(ProbeTarget(host, java_port)),
            self.bedrock(ProbeTarget(host, bedrock_port)),
            bedrock_deadline=self.settings.bedrock_deadline,
            race_window=self.settings.race_window,
        )
