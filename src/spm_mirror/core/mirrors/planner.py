"""Mirror planning.

Decides which pins become mirrored dependencies.
"""
from __future__ import annotations

import logging
from typing import Iterable

from spm_mirror.core.mirrors.models import Dependency, MirrorPlan, Pin, PinKind
from spm_mirror.core.redaction import redact_url

logger = logging.getLogger(__name__)


class MirrorPlanner:
    """Classify pins and deduplicate remote dependencies by URL.

    Only ``remoteSourceControl`` pins are mirrored. Local pins and unknown
    kinds are reported and skipped. When a URL is pinned more than once the
    last pin's revision wins; the dependency keeps its first-seen position.
    """

    def plan(self, pins: Iterable[Pin]) -> MirrorPlan:
        dependencies: dict[str, Dependency] = {}
        notices: list[str] = []

        for pin in pins:
            kind = pin.pin_kind
            if kind is PinKind.REMOTE_SOURCE_CONTROL:
                logger.info("Found a dependency: %s", pin.identity)
                previous = dependencies.get(pin.location)
                if previous is not None:
                    notice = (
                        f"Duplicate pin for {redact_url(pin.location)} ({pin.identity}); "
                        f"using revision {pin.revision or 'none'}"
                    )
                    logger.warning(notice)
                    notices.append(notice)
                dependencies[pin.location] = Dependency(url=pin.location, revision=pin.revision)
            elif kind is PinKind.LOCAL_SOURCE_CONTROL:
                notice = f"Found a dependency that's already local: {pin.identity}"
                logger.info(notice)
                notices.append(notice)
            else:
                notice = f"Found a dependency I don't know how to mirror: {pin.identity}, kind: {pin.kind}"
                logger.info(notice)
                notices.append(notice)

        return MirrorPlan(dependencies=dependencies, notices=tuple(notices))


__all__ = ["MirrorPlanner"]
