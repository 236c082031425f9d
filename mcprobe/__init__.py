"""Minecraft server status probes.
This package contains the Java and Bedrock edition probes, the auto-detection race, the shared result types and normalizers, and the aiohttp API that exposes them.
"""

# Expose top-level modules for convenience
__all__ = [
    'config',
    'errors',
    'registry',
    'results',
    'normalize',
    'combinators',
    'udp_ping',
    'queries',
    'bedrock',
    'java',
    'detect',
    'prober',
    'routes',
    'main',
    'cli'
]
