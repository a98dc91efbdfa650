"""
Authentication examples for the stats endpoints.

Demonstrates:
- HTTP Basic protection of stats, metrics and ux assets
- A custom auth engine finalizing the denial itself
- Extra lifecycle hooks alongside the aggregator
- Custom paths and route options
"""

import logging

from fastapi import FastAPI

from fastapi_request_stats import (
    BasicAuth,
    OnResponse,
    RequestContext,
    ResponseDraft,
    StatsPlugin,
    StatsSettings,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("stats-example")

app = FastAPI(title="Stats Authentication Examples")


class NullAggregator:
    def process_request(self, request, response):
        pass

    def process_response(self, response):
        pass

    def get_stats(self, query):
        return {"query": query}


# Basic authentication
async def check_credentials(username: str, password: str) -> bool:
    """Check credentials (replace with a real user store)."""
    return (username, password) == ("admin", "secret")


# Custom engine: only allow requests coming through the internal proxy
class InternalOnly:
    async def process_auth(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        if ctx.request.headers.get("X-Internal") == "1":
            ctx.authenticated = True
            return
        draft.status_code = 403
        draft.body = '{"error": "internal only"}'
        draft.media_type = "application/json"

    async def process_logout(self, ctx: RequestContext, draft: ResponseDraft) -> None:
        draft.status_code = 204


async def log_slow(ctx: RequestContext) -> None:
    duration = ctx.response.duration_ms
    if duration is not None and duration > 500:
        logger.info("slow request %s took %.0fms", ctx.request.url.path, duration)


@app.get("/items")
async def list_items():
    return [{"id": 1}, {"id": 2}]


StatsPlugin(
    NullAggregator(),
    auth=BasicAuth(check_credentials),
    settings=StatsSettings(
        uri_path="/monitor",
        route_options={"tags": ["monitoring"], "include_in_schema": False},
    ),
    hooks=[OnResponse(log_slow)],
).register(app)

# Second app gated on a proxy header: uvicorn 02_authentication:internal_app
internal_app = FastAPI(title="Internal Stats")
StatsPlugin(NullAggregator(), auth=InternalOnly()).register(internal_app)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test commands:
    # Denied:
    #   curl -i http://localhost:8000/monitor/stats
    #
    # Basic:
    #   curl -u admin:secret http://localhost:8000/monitor/stats
    #   curl -u admin:secret http://localhost:8000/monitor/metrics
    #
    # Logout:
    #   curl -i http://localhost:8000/monitor/logout
