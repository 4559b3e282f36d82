"""Strategy dispatch for fetch events."""

import time

from harbor.fetch.classifier import ClassificationPolicy, RequestCategory, classify
from harbor.fetch.strategies import (
    CacheFirstStrategy,
    FetchContext,
    FetchStrategy,
    NetworkFirstStrategy,
    PassthroughStrategy,
)
from harbor.http.models import Request, Response, offline_response
from harbor.lifetime import EventLifetime
from harbor.observability.logging import get_logger
from harbor.observability.metrics import FETCH_LATENCY, FETCH_OUTCOMES

logger = get_logger(__name__)


class FetchRouter:
    """Classifies requests and hands them to the matching strategy.

    This is the terminal error boundary of the fetch path: anything a
    strategy raises becomes the synthetic offline response.
    """

    def __init__(self, context: FetchContext, policy: ClassificationPolicy) -> None:
        self._context = context
        self._policy = policy
        passthrough = PassthroughStrategy(context)
        self._strategies: dict[RequestCategory, FetchStrategy] = {
            RequestCategory.NAVIGATION: NetworkFirstStrategy(context),
            RequestCategory.STATIC_ASSET: CacheFirstStrategy(context),
            RequestCategory.SENSITIVE: passthrough,
            RequestCategory.OTHER: passthrough,
        }

    def strategy_for(self, category: RequestCategory) -> FetchStrategy:
        return self._strategies[category]

    async def handle(self, request: Request, lifetime: EventLifetime | None = None) -> Response:
        """Answer one intercepted request."""
        lifetime = lifetime if lifetime is not None else EventLifetime()
        category = classify(request, self._policy)
        strategy = self.strategy_for(category)
        start_time = time.perf_counter()

        logger.debug(
            "fetch_dispatched",
            url=request.url,
            method=request.method,
            category=category.value,
            strategy=strategy.name,
        )

        try:
            response = await strategy.handle(request, category, lifetime)
        except Exception as e:
            logger.warning(
                "fetch_failed",
                url=request.url,
                method=request.method,
                category=category.value,
                error=str(e),
                error_type=type(e).__name__,
            )
            FETCH_OUTCOMES.labels(category=category.value, source="offline").inc()
            response = offline_response(self._context.offline_body)

        FETCH_LATENCY.labels(category=category.value).observe(time.perf_counter() - start_time)
        return response
