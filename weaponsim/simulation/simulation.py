"""Batch runner: many independent combats for one character/weapon/scenario.

Each combat draws from its own random stream, ``fresh("combat.<index>")``
under the batch seed, and starts with a freshly reset weapon. A combat's
outcome therefore depends only on the seed and its index, which is what lets
a batch be split across worker processes without changing any result.

Worker processes build their own :class:`Weapon` from the definition and use
the trackers registered by importing :mod:`weaponsim.metrics`. Trackers
registered at runtime in the parent process are only seen when ``workers``
is 1.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field, replace

from weaponsim import config
from weaponsim.errors import ConfigurationError
from weaponsim.game.characters import Character
from weaponsim.game.combat import CombatResult, CombatSimulator
from weaponsim.game.scenario import Scenario
from weaponsim.game.weapons import Weapon, WeaponDefinition
from weaponsim.metrics import MetricsRegistry
from weaponsim.simulation.baseline import baselines_for_level
from weaponsim.simulation.comparison import WeaponComparison, compare_analyses
from weaponsim.simulation.statistics import StatisticalAnalysis, StatisticalAnalyzer
from weaponsim.types import RandomSeed
from weaponsim.util.rng import StreamRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationConfig:
    iterations: int = config.DEFAULT_ITERATIONS
    seed: RandomSeed = config.RANDOM_SEED
    workers: int = config.DEFAULT_WORKERS

    def __post_init__(self) -> None:
        if self.iterations < 1:
            raise ConfigurationError("iterations must be >= 1")
        if self.workers < 1:
            raise ConfigurationError("workers must be >= 1")


@dataclass(frozen=True)
class SimulationResult:
    character_name: str
    weapon_name: str
    scenario: Scenario
    iterations: int
    seed: RandomSeed
    analysis: StatisticalAnalysis
    raw_results: tuple[CombatResult, ...] = field(repr=False)
    comparison: WeaponComparison | None = None


def run_combat_range(
    character: Character,
    definition: WeaponDefinition,
    scenario: Scenario,
    seed: RandomSeed,
    indices: Sequence[int],
    registry: MetricsRegistry | None = None,
) -> list[CombatResult]:
    """Run the combats numbered ``indices``. Also the worker process entry point."""
    streams = StreamRegistry(seed)
    weapon = Weapon(definition)
    results = []
    for index in indices:
        simulator = CombatSimulator(rand=streams.fresh(f"combat.{index}"), registry=registry)
        results.append(
            simulator.simulate_combat(character, weapon, scenario, combat_id=f"combat-{index}")
        )
    return results


class SimulationEngine:
    """Runs simulation batches and compares their results."""

    def __init__(
        self,
        simulation_config: SimulationConfig | None = None,
        registry: MetricsRegistry | None = None,
    ) -> None:
        self.config = simulation_config or SimulationConfig()
        self.registry = registry
        self.analyzer = StatisticalAnalyzer()

    def run_simulation(
        self,
        character: Character,
        weapon_definition: WeaponDefinition,
        scenario: Scenario,
    ) -> SimulationResult:
        iterations = self.config.iterations
        logger.info(
            f"Simulating {iterations} combats: {character.name} with "
            f"{weapon_definition.display_name} vs AC {scenario.target_armor_class} "
            f"{scenario.target_size}"
        )

        if self.config.workers == 1:
            results = run_combat_range(
                character,
                weapon_definition,
                scenario,
                self.config.seed,
                range(iterations),
                self.registry,
            )
        else:
            results = self._run_parallel(character, weapon_definition, scenario)

        analysis = self.analyzer.analyze(results)
        logger.info(
            f"Finished {weapon_definition.display_name}: mean damage "
            f"{analysis.damage_stats.mean:.2f} ({analysis.consistency.rating.value})"
        )
        return SimulationResult(
            character_name=character.name,
            weapon_name=results[0].weapon_name,
            scenario=scenario,
            iterations=iterations,
            seed=self.config.seed,
            analysis=analysis,
            raw_results=tuple(results),
        )

    def _run_parallel(
        self,
        character: Character,
        weapon_definition: WeaponDefinition,
        scenario: Scenario,
    ) -> list[CombatResult]:
        iterations = self.config.iterations
        workers = min(self.config.workers, iterations)
        chunk_size = -(-iterations // workers)
        chunks = [
            range(start, min(start + chunk_size, iterations))
            for start in range(0, iterations, chunk_size)
        ]
        logger.debug(f"Splitting {iterations} combats over {len(chunks)} workers")

        results: list[CombatResult] = []
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(
                    run_combat_range,
                    character,
                    weapon_definition,
                    scenario,
                    self.config.seed,
                    chunk,
                )
                for chunk in chunks
            ]
            # Chunks are contiguous and submitted in order.
            for future in futures:
                results.extend(future.result())
        return results

    def run_comparison(
        self,
        results: Sequence[SimulationResult],
        baseline_results: Sequence[SimulationResult],
    ) -> list[SimulationResult]:
        """Attach a comparison to each result that has a baseline for its scenario.

        Results without a matching baseline scenario are returned unchanged.
        """
        compared = []
        for result in results:
            baseline = next(
                (b for b in baseline_results if b.scenario.matches(result.scenario)),
                None,
            )
            if baseline is None:
                compared.append(result)
                continue
            comparison = compare_analyses(
                result.analysis,
                baseline.analysis,
                result.iterations,
                weapon_name=result.weapon_name,
                baseline_name=baseline.weapon_name,
            )
            compared.append(replace(result, comparison=comparison))
        return compared

    def run_baseline_comparison(
        self,
        character: Character,
        weapon_definition: WeaponDefinition,
        scenarios: Sequence[Scenario],
    ) -> list[SimulationResult]:
        """Simulate a weapon and every baseline for the character's level."""
        test_results = [
            self.run_simulation(character, weapon_definition, scenario)
            for scenario in scenarios
        ]
        compared = []
        for baseline in baselines_for_level(character.level):
            for test_result in test_results:
                baseline_result = self.run_simulation(
                    character, baseline, test_result.scenario
                )
                compared.extend(self.run_comparison([test_result], [baseline_result]))
        return compared
