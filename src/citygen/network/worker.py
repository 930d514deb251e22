"""Asynchronous request/response boundary around the network unifier.

Requests carry the flattened segment list; responses carry a success flag
plus either the UnifiedNetwork or an error description. Faults never cross
the boundary as exceptions.
"""

import asyncio
import logging
from concurrent.futures import Executor
from typing import Any, Dict, List, Optional

from ..contracts import RoadNetwork, UnifiedNetwork, UnifyResponse
from ..core.config import UnifierConfig
from .unifier import NetworkUnifier

logger = logging.getLogger(__name__)


def build_request(network: RoadNetwork) -> Dict[str, List[Dict[str, Any]]]:
    """Flatten a network into the request payload."""
    return {'segments': network.to_records()}


def handle_request(request: Dict[str, Any], config: Optional[UnifierConfig] = None) -> UnifyResponse:
    """Synchronously answer one unify request, converting faults into a failed response."""
    try:
        segments = request['segments']
        unified = NetworkUnifier(config).unify(segments)
        return UnifyResponse(success=True, unified_network=unified)
    except Exception as exc:
        logger.error(f"Network unification failed: {type(exc).__name__}: {exc}")
        return UnifyResponse(success=False, error=str(exc) or type(exc).__name__)


async def unify_async(
    request: Dict[str, Any],
    config: Optional[UnifierConfig] = None,
    executor: Optional[Executor] = None
) -> UnifyResponse:
    """
    Run the unifier off the event loop.

    Args:
        request: Payload with a 'segments' list (see build_request)
        config: Unifier thresholds
        executor: Executor to run in; the loop's default executor if None

    Returns:
        UnifyResponse, never raises for computation faults
    """
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(executor, handle_request, request, config)
    except Exception as exc:
        # Executor-level failures (e.g. a shut down pool)
        logger.error(f"Unifier executor failed: {type(exc).__name__}: {exc}")
        return UnifyResponse(success=False, error=str(exc) or type(exc).__name__)


class UnifierWorker:
    """Background unifier that keeps the last good result.

    A failed response leaves ``current`` untouched so the renderer can keep
    drawing the previous network.
    """

    def __init__(self, config: Optional[UnifierConfig] = None,
                 executor: Optional[Executor] = None):
        self.config = config
        self.executor = executor
        self.current: Optional[UnifiedNetwork] = None
        self.last_error: Optional[str] = None

    async def submit(self, network: RoadNetwork) -> UnifyResponse:
        logger.debug(f"Sending {len(network)} segments to unifier")
        response = await unify_async(build_request(network), self.config, self.executor)

        if response.success:
            self.current = response.unified_network
            self.last_error = None
        else:
            self.last_error = response.error
            logger.warning(f"Keeping previous unified network: {response.error}")
        return response
