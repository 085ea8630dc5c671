"""Turn-exchange combat against a single hostile actor.

Each command is a complete round: the player strikes, and a surviving
target strikes back.
"""

from ..logging import get_logger
from .state import PLAYING, Combat, GameState

logger = get_logger(__name__)

PLAYER_ATTACK_DAMAGE = 15
COUNTER_ATTACK_DAMAGE = 10


def start_combat(state: GameState, actor_id: int) -> None:
    actor = state.roster.get(actor_id)
    if actor is None:
        raise LookupError(f"no actor with handle {actor_id}")
    state.mode = Combat(actor_id=actor_id)
    state.messages.append(f"Combat with {actor.name}!")
    logger.debug("combat_started", actor=actor.name, actor_health=actor.health)


def _defeat(state: GameState, actor_id: int) -> None:
    """Remove the defeated actor and leave combat in the same step."""
    actor = state.roster.remove(actor_id)
    state.mode = PLAYING
    state.messages.append(f"{actor.name} defeated!")
    logger.info("actor_defeated", actor=actor.name, location=state.grid.name)


def attack(state: GameState, mode: Combat) -> None:
    """Strike the target; if it survives, it counter-attacks."""
    target = state.roster.get(mode.actor_id)
    if target is None:
        raise LookupError(f"no actor with handle {mode.actor_id}")

    target.health -= PLAYER_ATTACK_DAMAGE
    state.messages.append(f"You dealt {PLAYER_ATTACK_DAMAGE} damage!")

    if target.health <= 0:
        _defeat(state, mode.actor_id)
        return

    player = state.player
    player.health -= COUNTER_ATTACK_DAMAGE
    state.messages.append(f"Enemy dealt {COUNTER_ATTACK_DAMAGE} damage!")
    logger.debug(
        "combat_resolved",
        actor=target.name,
        actor_health=target.health,
        player_health=player.health,
    )
    if player.health <= 0:
        # No defeat state: the fight goes on at non-positive health.
        logger.warning("player_health_depleted", player_health=player.health)


def flee(state: GameState, mode: Combat) -> None:
    state.messages.append("You ran away!")
    state.mode = PLAYING
