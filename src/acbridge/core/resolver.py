"""Resolve a requested AC state to one of the device's recorded IR codes."""

from __future__ import annotations

import logging

from acbridge.errors import ModeNotSupportedError, NoMatchingCodeError
from acbridge.models import DeviceProfile, RecordedCode, TargetState

from .strategies import STRATEGIES

logger = logging.getLogger(__name__)


def find_code(
    profile: DeviceProfile, target: TargetState, device_id: str | None = None
) -> RecordedCode:
    """Pick the recorded code that drives the unit into ``target``.

    An unsupported mode is rejected before any strategy runs. Strategies are
    tried in priority order; the first one that returns a code wins and the
    first one that raises ends the search.
    """
    name = device_id or profile.friendly_name

    if (
        target.power
        and target.mode is not None
        and not profile.supports(target.mode)
    ):
        raise ModeNotSupportedError(name, target.mode, profile.supported_modes)

    for strategy in STRATEGIES:
        if not strategy.handles(target):
            continue
        logger.debug("%s search for %s: %s", strategy.name, name, target)
        match = strategy.find(profile.codes, target)
        if match is not None:
            return match

    raise NoMatchingCodeError(
        f"No matching IR code found for AC {name} with state: "
        f"{target.model_dump_json(exclude_none=True)}"
    )


def resolve(
    profile: DeviceProfile, target: TargetState, device_id: str | None = None
) -> str:
    return find_code(profile, target, device_id).code
