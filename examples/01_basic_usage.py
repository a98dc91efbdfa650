"""
Basic usage example of fastapi-request-stats.

Demonstrates:
- A minimal in-memory aggregator
- Registering the plugin on a FastAPI app
- Prometheus counters exposed on the metrics endpoint
"""

from collections import Counter as Tally

from fastapi import FastAPI
from prometheus_client import Counter
from starlette.requests import Request

from fastapi_request_stats import ResponseInfo, StatsPlugin

app = FastAPI(title="Basic Stats Example")

REQUESTS = Counter("api_requests", "Requests seen by the aggregator", ["method"])


class InMemoryAggregator:
    """Counts requests and status codes (replace with a real aggregator)."""

    def __init__(self) -> None:
        self.requests = 0
        self.statuses: Tally[int] = Tally()

    def process_request(self, request: Request, response: ResponseInfo) -> None:
        self.requests += 1
        REQUESTS.labels(method=request.method).inc()

    def process_response(self, response: ResponseInfo) -> None:
        if response.status_code is not None:
            self.statuses[response.status_code] += 1

    def get_stats(self, query):
        stats = {"requests": self.requests, "statuses": dict(self.statuses)}
        fields = query.get("fields")
        if isinstance(fields, list):
            return {k: v for k, v in stats.items() if k in fields}
        return stats


@app.get("/")
async def public_endpoint():
    """Tracked application endpoint."""
    return {"message": "Hello, World!"}


StatsPlugin(InMemoryAggregator()).register(app)


if __name__ == "__main__":
    import uvicorn

    print("Starting server at http://localhost:8000")
    print("\nTry:")
    print("  curl http://localhost:8000/")
    print("  curl 'http://localhost:8000/swagger-stats/stats?fields[]=requests'")
    print("  curl http://localhost:8000/swagger-stats/metrics")
    uvicorn.run(app, host="0.0.0.0", port=8000)
