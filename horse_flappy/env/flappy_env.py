# horse_flappy/env/flappy_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from horse_flappy.game.config import WIDTH, HEIGHT
from horse_flappy.game.engine import SimulationState
from horse_flappy.game.fences import FenceGen
from horse_flappy.game.render import draw_scene
from horse_flappy.game.session import Session, PLAYING
from horse_flappy.game.storage import MemoryStore
from horse_flappy.env.observations import build_observation, OBS_LOW, OBS_HIGH

PASS_REWARD = 10.0


class FlappyEnv(gym.Env):
    """
    Horse Flappy Gymnasium environment (vector observations).
    - Simulation at 60 Hz (internal).
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Observation: shape (6,), float32 (see observations.build_observation).
    - Reward: +1 per decision survived, +10 per fence passed, -1 on death.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.sim_fps = 60
        self.dt = 1.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = FLAP
        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[Session] = None
        self.store = MemoryStore()      # best score across episodes, never on disk
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # an explicit seed is used as-is; otherwise draw one from the env rng so
        # a seeded first reset makes every later layout reproducible too
        if seed is None:
            seed = int(self.np_random.integers(2**32 - 1))
        fence_gen = FenceGen(int(seed))
        self.session = Session(
            state=SimulationState(field_w=WIDTH, field_h=HEIGHT),
            fence_gen=fence_gen,
            store=self.store,
        )
        self.session.restart()          # ready -> playing
        self.timestep = 0
        self.current_seed = fence_gen.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "Call reset() before step()"

        if action == 1:
            self.session.impulse()

        passed = 0
        for _ in range(self.frame_skip):
            res = self.session.step(self.dt)
            passed += res.scored
            if self.session.mode != PLAYING:
                break

        alive = self.session.mode == PLAYING
        reward = (1.0 + PASS_REWARD * passed) if alive else -1.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        state = self.session.state
        obs = self._get_obs()
        info = {
            "score": state.score,
            "best": state.best,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "death_cause": self.session.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, float(reward), terminated, truncated, info

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        s = self.session.state
        return build_observation(s.horse, s.fences, s.score, s.field_w, s.field_h)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Horse Flappy - Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.font = pygame.font.SysFont("jetbrainsmono", 22)

        if self.render_mode == "human":
            # keep the OS from flagging the window as hung
            pygame.event.pump()

        s = self.session.state
        draw_scene(self.screen, s.horse, s.fences, s.score, self.session.mode,
                   font=self.font, best=s.best)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
