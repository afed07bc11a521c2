"""Host plugin contract.

The build host composes plugins from a descriptor: a category from its
plugin-type registry, a ``check`` predicate over the run context, and a
``handle`` coroutine that performs the work.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from doccloud_common import Settings

from doccloud_publisher.models import PublishConfig, PublishResult
from doccloud_publisher.orchestrator import PublishOrchestrator
from doccloud_publisher.progress import ProgressSink

PUBLISH_TASK = "publish"


class PluginType(str, Enum):
    """Plugin categories known to the build host."""

    COMPILER = "compiler"
    THEME = "theme"
    PUBLISHER = "publisher"


@dataclass
class RunContext:
    """What the host hands to a plugin for one run."""

    task: str
    config: PublishConfig
    storage: Path
    progress: ProgressSink
    settings: Optional[Settings] = None


@dataclass(frozen=True)
class PluginDescriptor:
    category: PluginType
    check: Callable[[Any], bool]
    handle: Callable[[RunContext], Awaitable[PublishResult]]


def install(plugin_types: Any = PluginType) -> PluginType:
    """Declare the plugin category from the host's registry."""
    return plugin_types.PUBLISHER


def check(context: Any) -> bool:
    """Run only for the host's ``publish`` task."""
    return getattr(context, "task", None) == PUBLISH_TASK


async def handle(context: RunContext) -> PublishResult:
    orchestrator = PublishOrchestrator(settings=context.settings)
    return await orchestrator.publish(context.config, context.storage, context.progress)


PLUGIN = PluginDescriptor(category=install(), check=check, handle=handle)
