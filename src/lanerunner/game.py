"""Game controller: tick orchestration, scoring and session state.

Tick order, all synchronous:
    input drained (by the caller) -> distance/speed -> player -> obstacles
    -> collectibles -> effects -> collectible hits -> obstacle hit
    -> reaction (shield absorb or game over) -> speed trail -> HUD
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lanerunner.animation.particles import GOLD, EffectsEngine
from lanerunner.config.settings import Settings
from lanerunner.core.events import INPUT_EVENTS, Event, EventBus, EventType
from lanerunner.core.random_source import RandomSource
from lanerunner.core.sinks import NullUISink, UISink
from lanerunner.core.state import GameState, StateContext, StateMachine
from lanerunner.simulation.collectibles import CollectibleSpawner
from lanerunner.simulation.entities import (
    POWERUP_FOR_COLLECTIBLE,
    Collectible,
    CollectibleKind,
    Obstacle,
    Particle,
    PlayerSnapshot,
    ScreenShake,
)
from lanerunner.simulation.geometry import Viewport
from lanerunner.simulation.obstacles import ObstacleSpawner
from lanerunner.simulation.player import Player

logger = logging.getLogger(__name__)


@dataclass
class RunStats:
    """Per-run counters."""
    score: int = 0
    coins: int = 0
    distance: int = 0
    speed: float = 0.0
    distance_timer: float = 0.0  # ms not yet converted to distance
    milestones: int = 0


@dataclass
class GameSnapshot:
    """Everything a presentation layer needs to draw one frame."""
    state: GameState
    stats: RunStats
    difficulty: float
    player: PlayerSnapshot
    obstacles: List[Obstacle] = field(default_factory=list)
    collectibles: List[Collectible] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    shake: Optional[ScreenShake] = None


class GameController:
    """Owns every subsystem of one game and drives them tick by tick."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        viewport: Optional[Viewport] = None,
        rng: Optional[RandomSource] = None,
        event_bus: Optional[EventBus] = None,
        ui: Optional[UISink] = None,
    ):
        self.settings = settings or Settings()
        cfg = self.settings

        self.viewport = viewport or Viewport(cfg.viewport.width, cfg.viewport.height)
        self.rng = rng or RandomSource(cfg.seed)
        self.event_bus = event_bus or EventBus()
        self.ui = ui or NullUISink()
        self.state_machine = StateMachine()

        self.player = Player(self.viewport, cfg.player)
        self.obstacles = ObstacleSpawner(self.viewport, self.rng, cfg.obstacles, cfg.limits)
        self.collectibles = CollectibleSpawner(self.viewport, self.rng, cfg.collectibles)
        self.effects = EffectsEngine(self.rng, cfg.effects, cfg.limits)

        self.stats = RunStats(speed=cfg.scoring.base_speed)

        self._unsubscribers = [
            self.event_bus.subscribe(event_type, self.handle_input)
            for event_type in INPUT_EVENTS
        ]
        self._unsubscribers.append(
            self.event_bus.subscribe(EventType.TICK, self._on_tick)
        )
        self.state_machine.add_listener(self._on_state_changed)

    @property
    def state(self) -> GameState:
        return self.state_machine.state

    @property
    def is_playing(self) -> bool:
        return self.state == GameState.PLAYING

    @property
    def speed(self) -> float:
        return self.stats.speed

    # Session control
    def start(self) -> bool:
        """Begin a run from the title screen or after a game over."""
        if self.state not in (GameState.START, GameState.GAME_OVER):
            return False
        self._reset_run()
        runs = self.state_machine.context.runs_started + 1
        if not self.state_machine.transition(GameState.PLAYING, runs_started=runs):
            return False
        logger.info(f"Run {runs} started")
        self._emit(EventType.GAME_STARTED, {"run": runs})
        self.ui.update_stats(self.stats.score, self.stats.coins, self.stats.distance)
        return True

    def restart(self) -> bool:
        if self.state != GameState.GAME_OVER:
            return False
        return self.start()

    def pause(self) -> bool:
        return self.state_machine.transition(GameState.PAUSED) if self.is_playing else False

    def resume(self) -> bool:
        if self.state != GameState.PAUSED:
            return False
        return self.state_machine.transition(GameState.PLAYING)

    def game_over(self) -> None:
        result = self.result()
        self.state_machine.transition(GameState.GAME_OVER, last_result=result)
        logger.info(
            f"Game over: score={result['score']} coins={result['coins']} "
            f"distance={result['distance']}"
        )
        self.ui.show_game_over(result)
        self._emit(EventType.GAME_OVER, result)
        # The collision shake keeps playing on the game-over screen
        self._reset_subsystems(keep_shake=True)

    def reset(self) -> None:
        """Return to a freshly constructed game on the title screen.

        The random source restarts from its seed, so a seeded game replays
        the same run after a reset.
        """
        self.rng.reseed()
        self._reset_run()
        self.state_machine.reset()

    def _reset_run(self) -> None:
        self.stats = RunStats(speed=self.settings.scoring.base_speed)
        self._reset_subsystems()

    def _reset_subsystems(self, keep_shake: bool = False) -> None:
        self.player.reset()
        self.obstacles.reset()
        self.collectibles.reset()
        if keep_shake:
            self.effects.clear_particles()
        else:
            self.effects.clear()

    def resize(self, viewport: Viewport) -> None:
        """Propagate a new playfield size to every component."""
        self.viewport = viewport
        self.player.set_viewport(viewport)
        self.obstacles.set_viewport(viewport)
        self.collectibles.set_viewport(viewport)
        logger.info(f"Viewport resized to {viewport.width:.0f}x{viewport.height:.0f}")

    # Input
    def handle_input(self, event: Event) -> bool:
        """Apply one input command. Returns True if it changed anything."""
        action = event.type

        if action == EventType.START:
            return self.start()
        if action == EventType.RESTART:
            return self.restart()
        if action == EventType.PAUSE:
            return self.pause()
        if action == EventType.RESUME:
            return self.resume()

        if not self.is_playing:
            return False

        if action == EventType.MOVE_LEFT:
            return self.player.move_left()
        if action == EventType.MOVE_RIGHT:
            return self.player.move_right()
        if action == EventType.JUMP:
            return self.player.jump()
        if action == EventType.SLIDE:
            return self.player.slide()
        if action == EventType.SLIDE_RELEASE:
            self.player.stop_sliding()
            return True

        return False

    # Tick
    def _on_tick(self, event: Event) -> None:
        self.update(event.data.get("delta_ms", 0.0))

    def update(self, delta_ms: float) -> None:
        if delta_ms < 0:
            logger.debug(f"Negative delta {delta_ms}ms clamped to 0")
            delta_ms = 0.0
        max_delta = self.settings.limits.max_delta_ms
        if max_delta is not None:
            delta_ms = min(delta_ms, max_delta)

        if self.state == GameState.GAME_OVER:
            self.effects.age_shake(delta_ms)
            return
        if not self.is_playing:
            return

        speed = self.stats.speed
        self._advance_distance(delta_ms)

        self.player.update(delta_ms)
        self.obstacles.update(delta_ms, speed)
        self.collectibles.update(delta_ms, speed)
        self.effects.update(delta_ms)

        for item in self.collectibles.check_collisions(self.player, self.effects):
            if item.kind == CollectibleKind.COIN:
                self.collect_coin(item)
            else:
                self.collect_powerup(item)

        hit = self.obstacles.check_collisions(self.player)
        if hit is not None and self.handle_collision(hit):
            return

        if self.player.has_speed_boost and self.rng.random() < self.settings.effects.trail_chance:
            self.effects.create_speed_trail(self.player.x, self.player.y)

        self.ui.update_stats(self.stats.score, self.stats.coins, self.stats.distance)

    def _advance_distance(self, delta_ms: float) -> None:
        """Convert elapsed time to whole distance units on a fixed cadence."""
        scoring = self.settings.scoring
        stats = self.stats

        stats.distance_timer += delta_ms
        if stats.distance_timer >= scoring.distance_interval_ms:
            units = int(stats.distance_timer // scoring.distance_interval_ms)
            stats.distance += units
            stats.distance_timer -= units * scoring.distance_interval_ms

        stats.speed = scoring.base_speed + stats.distance * scoring.speed_per_distance
        if self.settings.limits.max_speed is not None:
            stats.speed = min(stats.speed, self.settings.limits.max_speed)

        reached = stats.distance // scoring.distance_milestone
        if reached > stats.milestones:
            stats.score += (reached - stats.milestones) * scoring.milestone_bonus
            stats.milestones = reached

    # Collision outcomes
    def collect_coin(self, coin: Collectible) -> None:
        scoring = self.settings.scoring
        self.stats.coins += 1
        self.stats.score += scoring.score_per_coin + coin.value
        self.ui.show_score_popup(coin.value, coin.x, coin.y)
        self._emit(EventType.COIN_COLLECTED, {"value": coin.value, "x": coin.x, "y": coin.y})

    def collect_powerup(self, item: Collectible) -> None:
        kind = POWERUP_FOR_COLLECTIBLE[item.kind]
        duration = self.player.activate(kind)
        self.ui.flash_powerup_indicator(kind.value, duration)
        self.stats.score += self.settings.scoring.powerup_bonus
        self._emit(EventType.POWERUP_COLLECTED, {"kind": kind.value, "duration_ms": duration})

    def handle_collision(self, obstacle: Obstacle) -> bool:
        """React to an obstacle hit. Returns True if the run ended."""
        if self.player.consume_shield():
            logger.info(f"Shield absorbed {obstacle.kind.value} hit")
            self.ui.hide_powerup_indicator("shield")
            self.effects.create_powerup_effect(self.player.x, self.player.y, GOLD)
            self._emit(EventType.SHIELD_ABSORBED, {"obstacle": obstacle.kind.value})
            return False

        effects_cfg = self.settings.effects
        self.effects.create_collision_effect(self.player.x, self.player.y)
        self.effects.create_screen_shake(
            effects_cfg.collision_shake_intensity,
            effects_cfg.collision_shake_duration_ms,
        )
        self.game_over()
        return True

    # Read access
    def result(self) -> dict[str, Any]:
        return {
            "score": self.stats.score,
            "coins": self.stats.coins,
            "distance": self.stats.distance,
        }

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            state=self.state,
            stats=copy.copy(self.stats),
            difficulty=self.obstacles.difficulty,
            player=self.player.snapshot(),
            obstacles=self.obstacles.snapshot(),
            collectibles=self.collectibles.snapshot(),
            particles=self.effects.snapshot(),
            shake=copy.copy(self.effects.shake),
        )

    def close(self) -> None:
        """Detach from the event bus."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.state_machine.remove_listener(self._on_state_changed)

    def _emit(self, event_type: EventType, data: Optional[dict] = None) -> None:
        self.event_bus.emit(Event(event_type, data=data or {}, source="game"))

    def _on_state_changed(
        self, old_state: GameState, new_state: GameState, context: StateContext
    ) -> None:
        self._emit(EventType.STATE_CHANGED, {"from": old_state.name, "to": new_state.name})
