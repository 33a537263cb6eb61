"""Application context - the loop and every long-lived component, wired once."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .config import HubConfig
from .core.runner import TestRunner
from .hub import BroadcastHub
from .services import (
    CoverageService,
    DiscoveryService,
    RunService,
    create_coverage_service,
    create_discovery_service,
    create_run_service,
)


@dataclass
class HubContext:
    """
    Everything a handler needs, passed explicitly instead of kept as globals.

    Attributes:
        config: Runtime configuration
        loop: Event loop all processes and connections run on
        hub: Live viewer registry
        runner: Spawns runner processes
        discovery: Catalog and project info
        runs: Run lifecycle (single active run, failed-test memory)
        coverage: Clover report reading
    """
    config: HubConfig
    loop: asyncio.AbstractEventLoop
    hub: BroadcastHub
    runner: TestRunner
    discovery: DiscoveryService
    runs: RunService
    coverage: CoverageService

    @classmethod
    def create(cls, config: HubConfig, loop: asyncio.AbstractEventLoop) -> HubContext:
        hub = BroadcastHub(loop)
        runner = TestRunner(loop, config.project_root)
        return cls(
            config=config,
            loop=loop,
            hub=hub,
            runner=runner,
            discovery=create_discovery_service(config.project_root),
            runs=create_run_service(runner, hub, config.temp_dir, run_timeout=config.run_timeout),
            coverage=create_coverage_service(config.project_root),
        )
