"""CLI entry point."""

from __future__ import annotations

from typing import Optional

import typer
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(help="Multiplayer UNO room server and offline simulator")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default UNO_HOST or 0.0.0.0)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (default PORT or 3000)"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="DEBUG, INFO, WARNING, ERROR"),
) -> None:
    """Run the WebSocket room server."""
    import dataclasses

    import uvicorn

    from unoroom.config import Settings
    from unoroom.server.app import create_app
    from unoroom.server.logs import configure_logging

    settings = Settings.from_env()
    overrides = {k: v for k, v in {"host": host, "port": port, "log_level": log_level}.items() if v is not None}
    settings = dataclasses.replace(settings, **overrides)
    configure_logging(settings.log_level.upper(), settings.log_json)

    typer.echo(f"UNO server running on http://{settings.host}:{settings.port}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@app.command()
def simulate(
    players: int = typer.Option(4, "--players", "-n", min=2, max=10, help="Number of bot players"),
    games: int = typer.Option(1, "--games", "-g", min=1, help="Number of games"),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    show_history: bool = typer.Option(False, "--history", help="Print the event log of a single game"),
) -> None:
    """Play bots against each other without a server."""
    from unoroom.agents import RandomAgent
    from unoroom.orchestration import GameRunner, run_tournament

    agents = {f"player_{i}": RandomAgent(name=f"Bot{i + 1}", seed=None if seed is None else seed + i) for i in range(players)}

    if games == 1:
        runner = GameRunner(agents, seed=seed)
        result = runner.run()
        if show_history and runner.last_state is not None:
            for event in runner.last_state.history:
                typer.echo(f"> {event}")
        typer.echo(f"Winner: {result.winner or 'None (draw)'}")
        typer.echo(f"Turns: {result.num_turns}")
        return

    wins = run_tournament(agents, num_games=games, seed=seed)
    typer.echo("Simulation results:")
    for pid, w in sorted(wins.items(), key=lambda x: -x[1]):
        typer.echo(f"  {pid}: {w} wins")


if __name__ == "__main__":
    app()
