"""Custom game messages exchanged between controllers and the receiver.

Senders put free-form JSON objects on the wire. ``parse_game_message``
classifies a payload by the keys it carries, in a fixed precedence, so the
game controller can dispatch on a single ``kind`` instead of probing keys.
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional


@dataclass
class GameMessage:
    kind = 'message'
    payload: Any = field(default=None, repr=False)


@dataclass
class ClearGrid(GameMessage):
    kind = 'clear'


@dataclass
class ArtistAnnouncement(GameMessage):
    kind = 'artist'
    artist_id: Optional[str] = None


@dataclass
class WordsRequest(GameMessage):
    kind = 'player'


@dataclass
class WordList(GameMessage):
    kind = 'words'
    words: Any = None


@dataclass
class GuessMessage(GameMessage):
    kind = 'guess'
    guess: Any = None


@dataclass
class GridCell(GameMessage):
    kind = 'grid'
    cell: Optional[str] = None


@dataclass
class Unrecognized(GameMessage):
    kind = 'unrecognized'
    reason: str = ''


def _present(payload: Mapping, key: str) -> bool:
    # Senders use JSON truthiness: lists and objects count even when empty
    value = payload.get(key)
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def parse_game_message(payload: Any, legacy_grid: bool = True) -> GameMessage:
    """Classify a custom message payload.

    First match wins: clear, artist, player, words, guess, then the legacy
    ``grid`` cell paint when ``legacy_grid`` is enabled. Anything else is
    returned as ``Unrecognized`` with a reason.
    """
    if not isinstance(payload, Mapping):
        return Unrecognized(payload=payload, reason=f'payload is {type(payload).__name__}, expected an object')

    if _present(payload, 'clear'):
        return ClearGrid(payload=payload)
    if _present(payload, 'artist'):
        return ArtistAnnouncement(payload=payload, artist_id=str(payload['artist']))
    if _present(payload, 'player'):
        return WordsRequest(payload=payload)
    if _present(payload, 'words'):
        return WordList(payload=payload, words=payload['words'])
    if _present(payload, 'guess'):
        return GuessMessage(payload=payload, guess=payload['guess'])

    if legacy_grid and _present(payload, 'grid'):
        return GridCell(payload=payload, cell=str(payload['grid']))

    keys = ', '.join(sorted(str(k) for k in payload.keys())) or 'none'
    return Unrecognized(payload=payload, reason=f'no recognized key (keys: {keys})')
