from __future__ import annotations

import argparse

import gymnasium as gym

import command_stack.env  # noqa: F401


def run_random(episodes: int = 3, seed: int | None = None) -> float:
    env = gym.make("CommandStack-10x20-v0")
    total_reward = 0.0
    for ep in range(episodes):
        obs, info = env.reset(seed=None if seed is None else seed + ep)
        done = False
        while not done:
            obs, reward, terminated, truncated, info = env.step(env.action_space.sample())
            total_reward += float(reward)
            done = terminated or truncated
        print(f"Episode {ep + 1}/{episodes} score={info['score']} lines={info['lines_cleared']}")
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--episodes", type=int, default=3)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run_random(args.episodes, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
