import time

import aiohttp

from hive.main.logging import get_logger

logger = get_logger(__name__)


class AioHttpClient:
    session: aiohttp.ClientSession | None = None

    def _create_trace_config(self) -> aiohttp.TraceConfig:
        """Log slow DNS lookups, these show up as scheduler timeouts otherwise."""
        trace = aiohttp.TraceConfig()

        async def on_dns_start(session, trace_config_ctx, params):
            trace_config_ctx._dns_start_time = time.perf_counter()

        async def on_dns_end(session, trace_config_ctx, params):
            if not hasattr(trace_config_ctx, "_dns_start_time"):
                return
            dns_duration_ms = (time.perf_counter() - trace_config_ctx._dns_start_time) * 1000
            if dns_duration_ms > 2000:
                logger.warning(
                    f"SLOW DNS resolution detected for {params.host}",
                    extra={
                        "event": "dns_slow",
                        "host": params.host,
                        "duration_ms": int(dns_duration_ms),
                        "threshold_ms": 2000,
                    },
                )

        trace.on_dns_resolvehost_start.append(on_dns_start)
        trace.on_dns_resolvehost_end.append(on_dns_end)

        return trace

    def start(self):
        if self.session is not None:
            return

        # The run-all endpoint may purge for minutes, hence the long total timeout
        timeout = aiohttp.ClientTimeout(total=15 * 60, connect=10.0)
        connector = aiohttp.TCPConnector(
            limit=10,
            enable_cleanup_closed=True,
            ttl_dns_cache=300,
        )

        self.session = aiohttp.ClientSession(
            timeout=timeout,
            connector=connector,
            trace_configs=[self._create_trace_config()],
        )

    async def stop(self):
        if self.session is None:
            return
        await self.session.close()
        self.session = None

    def __call__(self) -> aiohttp.ClientSession:
        assert self.session is not None
        return self.session


aiohttp_client = AioHttpClient()
