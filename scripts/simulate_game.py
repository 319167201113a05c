"""Simulate a game with random agents and print its event log."""

from unoroom.agents import RandomAgent
from unoroom.orchestration.game_runner import GameRunner


def main():
    agents = {
        "p1": RandomAgent("Bot1", seed=1),
        "p2": RandomAgent("Bot2", seed=2),
        "p3": RandomAgent("Bot3", seed=3, forgets_uno=0.5),
        "p4": RandomAgent("Bot4", seed=4),
    }

    runner = GameRunner(agents, seed=42)
    result = runner.run()

    if runner.last_state is not None:
        for event in runner.last_state.history:
            print(f"> {event}")

    print(f"Game finished! Winner: {result.winner}")
    print(f"Turns: {result.num_turns}")


if __name__ == "__main__":
    main()
