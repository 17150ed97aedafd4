"""
Aquarium simulation kernel.

Owns every entity collection for one run (agents, particles, emitters,
scenery) and composites one frame per tick in a fixed layer order:

    ocean -> light rays -> sand -> background decor -> marine snow
    -> bubbles -> agents -> foreground decor -> vegetation

The clock advances by a fixed step per tick, so simulated speed does not
depend on the host frame rate.
"""

import time
from typing import Dict, List, Mapping, Optional, Sequence

from .entity import Agent
from .data_types import Species, SceneConfig
from .spawning import spawn_agents, count_by_species
from .scenery import place_decor, generate_weeds, generate_sand_blemishes
from .environment import EnvironmentRenderer
from .particles import BubblePool, make_bubble_field, make_marine_snow
from .avoidance import apply_avoidance
from .motion import MotionContext, update_agent
from .sprites import draw_agent
from .resources import await_images, resolve_pools, resolve_decor_pool
from .rng import make_rng
from .constants import TICK_TIME_WINDOW, IMAGE_LOAD_TIMEOUT_S


LAYER_ORDER = (
    'ocean',
    'light_rays',
    'sand',
    'background_decor',
    'marine_snow',
    'bubbles',
    'agents',
    'foreground_decor',
    'vegetation',
)


class AquariumSimulation:
    """
    Main simulation class for the aquarium scene.

    Built once per run, after every image has loaded, so the population
    is complete from tick zero. render_frame() advances one tick and paints
    it; teardown() releases every collection.
    """

    def __init__(
        self,
        width: int,
        height: int,
        count: int,
        species_images: Optional[Mapping[Species, Sequence]] = None,
        decor_images: Optional[Sequence] = None,
        config: Optional[SceneConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize simulation.

        Args:
            width: Scene width (px), validated by the host
            height: Scene height (px), validated by the host
            count: Number of agents (fixed for the run)
            species_images: {species: [loaded image, ...]}
            decor_images: Loaded decor images
            config: Scene configuration (defaults from constants.py)
            seed: Overrides config.seed
        """
        if count < 0:
            raise ValueError(f"Agent count must be non-negative, got {count}")

        self.config: SceneConfig = config or SceneConfig.default()
        self.seed: int = seed if seed is not None else self.config.seed
        self.width = width
        self.height = height
        self.count = count

        # Simulation state
        self.time: float = 0.0
        self.tick_count: int = 0
        self.dt: float = self.config.time_step
        self.last_frame_layers: List[str] = []
        self._torn_down = False

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW  # Rolling average window

        # Error telemetry
        self._skipped_this_tick: int = 0
        self._skipped_total: int = 0
        self._layer_errors: int = 0

        env = self.config.environment
        sand_top = height * (1.0 - env.sand_ratio)

        # Agents
        pools = {s: list(imgs) for s, imgs in (species_images or {}).items()}
        self.agents: List[Agent] = spawn_agents(
            count, self.config, pools, width, height, make_rng(self.seed, "population")
        )
        self.motion = MotionContext(width, height, self.config.species, self.config.avoidance)

        # Static scenery
        decor = place_decor(
            env.decor_count, list(decor_images or []), width, height, env.sand_ratio,
            make_rng(self.seed, "decor"), env.decor_max_attempts, env.decor_min_separation
        )
        self.environment = EnvironmentRenderer(
            width, height, env,
            decor=decor,
            weeds=generate_weeds(width, height, make_rng(self.seed, "weeds")),
            blemishes=generate_sand_blemishes(width, height, env.sand_ratio, make_rng(self.seed, "sand"))
        )

        # Ambient particles
        particles = self.config.particles
        steady = make_bubble_field(
            max(particles.bubble_min, count), width, height, particles, make_rng(self.seed, "bubbles")
        )
        self.bubbles = BubblePool(steady, width, height, sand_top, particles, make_rng(self.seed, "emitters"))
        self.marine_snow = make_marine_snow(width, height, particles, make_rng(self.seed, "marine_snow"))

        counts = count_by_species(self.agents)
        breakdown = ", ".join(f"{s.value}={n}" for s, n in counts.items())
        print(f"[OK] Simulation initialized: {len(self.agents)} agents ({breakdown}), "
              f"{len(self.bubbles.steady)} bubbles, {len(self.marine_snow)} snow, "
              f"{len(decor)} decor, {width}x{height}, seed={self.seed}")

    @classmethod
    def from_images(
        cls,
        width: int,
        height: int,
        count: int,
        images: Mapping[str, object],
        config: Optional[SceneConfig] = None,
        seed: Optional[int] = None,
        timeout: float = IMAGE_LOAD_TIMEOUT_S
    ) -> 'AquariumSimulation':
        """
        Two-phase initialisation: wait for the requested images, then build.

        Args:
            images: {asset name: image resource}, possibly still loading
            timeout: Seconds to wait before dropping unfinished images
        """
        config = config or SceneConfig.default()
        loaded = await_images(images, timeout)
        return cls(
            width, height, count,
            species_images=resolve_pools(config.assets, loaded),
            decor_images=resolve_decor_pool(config.assets, loaded),
            config=config,
            seed=seed
        )

    @property
    def layer_order(self):
        return LAYER_ORDER

    @property
    def is_torn_down(self) -> bool:
        return self._torn_down

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def render_frame(self, surface):
        """
        Advance the clock one step and paint the frame.

        Never raises: a failing agent is skipped for this tick, a failing
        layer stops only that layer.
        """
        if self._torn_down:
            self.last_frame_layers = []
            return

        start_time = time.perf_counter()

        self.time += self.dt
        self.tick_count += 1
        self._skipped_this_tick = 0
        self.last_frame_layers = []

        for name in LAYER_ORDER:
            painter = getattr(self, f"_paint_{name}")
            try:
                painter(surface)
            except Exception as e:
                self._layer_errors += 1
                print(f"[WARN] Tick {self.tick_count}: layer '{name}' aborted: {e!r}")
            self.last_frame_layers.append(name)

        elapsed = time.perf_counter() - start_time
        self._record_tick_time(elapsed)

    def _paint_ocean(self, surface):
        self.environment.paint_ocean(surface, self.time)

    def _paint_light_rays(self, surface):
        self.environment.paint_light_rays(surface, self.time)

    def _paint_sand(self, surface):
        self.environment.paint_sand(surface, self.time)

    def _paint_background_decor(self, surface):
        self.environment.paint_background_decor(surface, self.time)

    def _paint_marine_snow(self, surface):
        self.marine_snow.update()
        self.marine_snow.draw(surface, self.time)

    def _paint_bubbles(self, surface):
        self.bubbles.update_and_draw(surface, self.time)

    def _paint_agents(self, surface):
        """Avoidance for the whole population, then motion + draw per agent"""
        if not self.agents:
            return

        try:
            apply_avoidance(self.agents, self.height, self.config.species, self.config.avoidance)
        except Exception as e:
            # Motion still runs on last tick's forces
            self._layer_errors += 1
            print(f"[WARN] Tick {self.tick_count}: avoidance skipped: {e!r}")

        first_failure = None
        for agent in self.agents:
            try:
                update_agent(agent, self.time, self.motion)
                draw_agent(surface, agent, self.motion)
            except Exception as e:
                self._skipped_this_tick += 1
                if first_failure is None:
                    first_failure = (agent.agent_id, e)

        if first_failure is not None:
            self._skipped_total += self._skipped_this_tick
            agent_id, error = first_failure
            print(f"[WARN] Tick {self.tick_count}: skipped {self._skipped_this_tick} agent(s), "
                  f"first {agent_id}: {error!r}")

    def _paint_foreground_decor(self, surface):
        self.environment.paint_foreground_decor(surface, self.time)

    def _paint_vegetation(self, surface):
        self.environment.paint_vegetation(surface, self.time)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def teardown(self):
        """Release every entity collection; later frames paint nothing"""
        self.agents = []
        self.environment.clear()
        self.bubbles.clear()
        self.marine_snow.particles = []
        self._torn_down = True

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def get_tick_stats(self) -> dict:
        """
        Get current tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms and
            skipped-entity counters
        """
        stats = {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': 0.0,
            'last_tick_time_ms': 0.0,
            'skipped_last_tick': self._skipped_this_tick,
            'skipped_total': self._skipped_total,
            'layer_errors': self._layer_errors,
        }
        if self._tick_times:
            stats['avg_tick_time_ms'] = self._tick_time_sum / len(self._tick_times) * 1000.0
            stats['last_tick_time_ms'] = self._tick_times[-1] * 1000.0
        return stats

    def _record_tick_time(self, elapsed: float):
        """
        Record tick timing for rolling average.

        Args:
            elapsed: Tick time in seconds
        """
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        # Maintain rolling window
        if len(self._tick_times) > self._tick_time_window:
            removed = self._tick_times.pop(0)
            self._tick_time_sum -= removed

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with tick_count, time, agents, particle counts, timing
        """
        return {
            'tick_count': self.tick_count,
            'time': self.time,
            'agent_count': len(self.agents),
            'agents': [a.to_dict() for a in self.agents],
            'bubble_count': len(self.bubbles.all_bubbles()),
            'emitter_count': len(self.bubbles.emitters),
            'marine_snow_count': len(self.marine_snow),
            'timing': self.get_tick_stats()
        }

    def species_counts(self) -> Dict[Species, int]:
        return count_by_species(self.agents)

    def print_tick_summary(self):
        """Print tick summary to console (lightweight monitoring)"""
        stats = self.get_tick_stats()
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Last: {stats['last_tick_time_ms']:6.3f} ms | "
              f"Agents: {len(self.agents)} | "
              f"Emitters: {len(self.bubbles.emitters)}")
