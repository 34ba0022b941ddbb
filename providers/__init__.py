# Draw Game Registry
# Maps draw game ids to their fixed definitions

from typing import Dict

_REGISTRY: Dict[str, object] = {}

def register_draw_game(definition):
    """Register a multi-state draw game"""
    _REGISTRY[definition.game_id.lower()] = definition

def get_draw_game(game_id: str):
    """Get the definition for a draw game"""
    definition = _REGISTRY.get(game_id.lower())
    if not definition:
        raise ValueError(f"No draw game registered with id: {game_id}")
    return definition

def list_draw_games() -> list:
    """All registered draw game definitions, in registration order"""
    return list(_REGISTRY.values())
