"""Branching dialogue: walking an actor's graph of text nodes.

The cursor (actor, node, selected option) lives in the Dialogue mode
itself, so each transition is just a replacement of state.mode.
"""

from .state import PLAYING, Dialogue, GameState
from .world import DialogueNode


def current_node(state: GameState, mode: Dialogue) -> DialogueNode:
    """The node the conversation is currently at."""
    actor = state.roster.get(mode.actor_id)
    if actor is None:
        raise LookupError(f"no actor with handle {mode.actor_id}")
    return actor.dialogue[mode.node]


def start_dialogue(state: GameState, actor_id: int) -> None:
    state.mode = Dialogue(actor_id=actor_id, node=0, selected=0)


def select_previous(state: GameState, mode: Dialogue) -> None:
    """Move the highlight up one option; it does not wrap."""
    if mode.selected > 0:
        state.mode = Dialogue(mode.actor_id, mode.node, mode.selected - 1)


def select_next(state: GameState, mode: Dialogue) -> None:
    """Move the highlight down one option; it does not wrap."""
    node = current_node(state, mode)
    if mode.selected + 1 < len(node.options):
        state.mode = Dialogue(mode.actor_id, mode.node, mode.selected + 1)


def confirm(state: GameState, mode: Dialogue) -> None:
    """Follow the highlighted option, or end the conversation."""
    option = current_node(state, mode).options[mode.selected]
    if option.next_node is None:
        state.mode = PLAYING
    else:
        state.mode = Dialogue(mode.actor_id, option.next_node, 0)


def cancel(state: GameState, mode: Dialogue) -> None:
    state.mode = PLAYING
