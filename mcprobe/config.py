"""Runtime settings, read from the environment by the launcher."""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

JAVA_PORT = 25565
BEDROCK_PORT = 19132


def _seconds(env: Mapping[str, str], name: str, default: Optional[float]) -> Optional[float]:
    raw = env.get(name)
    if raw is None or raw == '':
        return default
    return float(raw)


@dataclass(frozen=True)
class Settings:
    host: str = '0.0.0.0'
    port: int = 3000
    development: bool = False

    # UDP unconnected ping
    udp_attempts: int = 2
    udp_deadline: float = 1.2
    ping_cap: float = 1.5

    # Bedrock status probe
    bedrock_query_timeout: float = 1.5
    bedrock_deadline: float = 2.0

    # Java status probe
    java_connect_timeout: float = 3.0
    java_query_timeout: float = 3.0

    # Auto-detection
    detect_timeout: float = 5.0
    race_window: Optional[float] = None

    shutdown_timeout: float = 10.0

    def __post_init__(self):
        if self.udp_attempts < 1:
            raise ValueError('udp_attempts must be at least 1')
        # inner deadlines never outlive the deadline enclosing them
        chain = [
            ('udp_deadline', self.udp_deadline),
            ('ping_cap', self.ping_cap),
            ('bedrock_deadline', self.bedrock_deadline),
            ('detect_timeout', self.detect_timeout),
        ]
        for (inner, inner_value), (outer, outer_value) in zip(chain, chain[1:]):
            if inner_value > outer_value:
                raise ValueError(f'{inner} ({inner_value}s) exceeds {outer} ({outer_value}s)')
        if self.bedrock_query_timeout > self.bedrock_deadline:
            raise ValueError('bedrock_query_timeout exceeds bedrock_deadline')
        for name in ('java_connect_timeout', 'java_query_timeout'):
            if getattr(self, name) > self.detect_timeout:
                raise ValueError(f'{name} exceeds detect_timeout')
        if self.race_window is not None and self.race_window > self.detect_timeout:
            raise ValueError('race_window exceeds detect_timeout')

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        env = os.environ if environ is None else environ
        mode = env.get('APP_ENV') or env.get('NODE_ENV') or 'production'
        return cls(
            host=env.get('HOST', '0.0.0.0'),
            port=int(env.get('PORT', '3000')),
            development=mode.lower() == 'development',
            udp_attempts=int(env.get('PROBE_UDP_ATTEMPTS', '2')),
            udp_deadline=_seconds(env, 'PROBE_UDP_DEADLINE', 1.2),
            ping_cap=_seconds(env, 'PROBE_PING_CAP', 1.5),
            bedrock_query_timeout=_seconds(env, 'PROBE_BEDROCK_QUERY_TIMEOUT', 1.5),
            bedrock_deadline=_seconds(env, 'PROBE_BEDROCK_DEADLINE', 2.0),
            java_connect_timeout=_seconds(env, 'PROBE_JAVA_CONNECT_TIMEOUT', 3.0),
            java_query_timeout=_seconds(env, 'PROBE_JAVA_QUERY_TIMEOUT', 3.0),
            detect_timeout=_seconds(env, 'PROBE_DETECT_TIMEOUT', 5.0),
            race_window=_seconds(env, 'PROBE_RACE_WINDOW', None),
            shutdown_timeout=_seconds(env, 'SHUTDOWN_TIMEOUT', 10.0),
        )
