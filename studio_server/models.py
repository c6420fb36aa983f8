"""Bridge models: cards, bids and the contexts handed to the decision engine."""
from enum import IntEnum, Enum
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from .errors import InvalidContextError


# === Enums ===

class Suit(IntEnum):
    """Suits in auction order: clubs < diamonds < hearts < spades."""
    CLUBS = 1
    DIAMONDS = 2
    HEARTS = 3
    SPADES = 4


class Rank(IntEnum):
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class DecisionStatus(Enum):
    OK = "ok"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    INVALID = "invalid"


# === Mappings ===

SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}

SUIT_NAMES = {
    Suit.CLUBS: "clubs",
    Suit.DIAMONDS: "diamonds",
    Suit.HEARTS: "hearts",
    Suit.SPADES: "spades",
}

RANK_NAMES = {
    Rank.ACE: "A",
    Rank.KING: "K",
    Rank.QUEEN: "Q",
    Rank.JACK: "J",
    Rank.TEN: "10",
    Rank.NINE: "9",
    Rank.EIGHT: "8",
    Rank.SEVEN: "7",
    Rank.SIX: "6",
    Rank.FIVE: "5",
    Rank.FOUR: "4",
    Rank.THREE: "3",
    Rank.TWO: "2",
}

SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}
NAME_TO_SUIT = {v: k for k, v in SUIT_NAMES.items()}
NAME_TO_RANK = {v: k for k, v in RANK_NAMES.items()}

NO_TRUMP = "SA"

# Strains in auction order, used for bid ordering and response scanning
STRAINS = (
    SUIT_SYMBOLS[Suit.CLUBS],
    SUIT_SYMBOLS[Suit.DIAMONDS],
    SUIT_SYMBOLS[Suit.HEARTS],
    SUIT_SYMBOLS[Suit.SPADES],
    NO_TRUMP,
)

PASS = "Passe"
DOUBLE = "Contre"
REDOUBLE = "Surcontre"
SPECIAL_BIDS = (PASS, DOUBLE, REDOUBLE)

POSITIONS = ("N", "E", "S", "W")

# Longest-suit ties go to the first suit in this order
SUIT_SCAN_ORDER = (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS)

MAX_HAND_SIZE = 13

SOURCE_REMOTE = "remote"
SOURCE_REMOTE_INVALID = "remote-invalid"
SOURCE_HEURISTIC = "heuristic"


def parse_suit(value) -> Suit:
    """Parse a suit given as a Suit, a symbol ('♠') or a name ('spades')."""
    if isinstance(value, Suit):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text in SYMBOL_TO_SUIT:
            return SYMBOL_TO_SUIT[text]
        if text.lower() in NAME_TO_SUIT:
            return NAME_TO_SUIT[text.lower()]
    raise ValueError(f"Unknown suit: {value!r}")


def parse_trump(value) -> Union[Suit, str, None]:
    """Parse a trump designation: a suit, 'SA' for no-trump, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, str) and value.strip().upper() == NO_TRUMP:
        return NO_TRUMP
    return parse_suit(value)


def strain_label(value) -> str:
    if value is None:
        return "-"
    if value == NO_TRUMP:
        return NO_TRUMP
    return SUIT_SYMBOLS[value]


# === Models ===

@dataclass(frozen=True)
class Card:
    rank: Rank
    suit: Suit

    @property
    def rank_name(self) -> str:
        return RANK_NAMES[self.rank]

    @property
    def suit_symbol(self) -> str:
        return SUIT_SYMBOLS[self.suit]

    @property
    def label(self) -> str:
        return f"{self.rank_name}{self.suit_symbol}"

    def __str__(self) -> str:
        return self.label

    def to_dict(self) -> dict:
        return {"rank": self.rank_name, "suit": self.suit_symbol}

    @classmethod
    def from_label(cls, label: str) -> "Card":
        """Build a card from its label, e.g. '10♥' or 'A♠'."""
        text = label.strip()
        if len(text) < 2 or text[:-1] not in NAME_TO_RANK:
            raise ValueError(f"Unknown card: {label!r}")
        return cls(rank=NAME_TO_RANK[text[:-1]], suit=parse_suit(text[-1]))

    @classmethod
    def from_dict(cls, data) -> "Card":
        """Build a card from {'rank': 'A', 'suit': '♠'} or a label string."""
        if isinstance(data, str):
            return cls.from_label(data)
        rank = str(data["rank"]).strip().upper()
        if rank not in NAME_TO_RANK:
            raise ValueError(f"Unknown rank: {data['rank']!r}")
        return cls(rank=NAME_TO_RANK[rank], suit=parse_suit(data["suit"]))


def new_deck() -> list[Card]:
    """All 52 cards, spades first, each suit from the ace down."""
    return [Card(rank, suit) for suit in SUIT_SCAN_ORDER for rank in sorted(Rank, reverse=True)]


def sort_hand(hand: Sequence[Card]) -> list[Card]:
    """Sort by suit (♠ ♥ ♦ ♣) then rank, highest first."""
    return sorted(hand, key=lambda c: (SUIT_SCAN_ORDER.index(c.suit), -c.rank))


def hand_label(hand: Sequence[Card]) -> str:
    return " ".join(c.label for c in hand) if hand else "-"


@dataclass(frozen=True)
class Bid:
    level: int = 0
    strain: Optional[str] = None
    special: Optional[str] = None

    @property
    def token(self) -> str:
        if self.special:
            return self.special
        return f"{self.level}{self.strain}"

    def __str__(self) -> str:
        return self.token

    @property
    def is_pass(self) -> bool:
        return self.special == PASS

    @property
    def is_contract(self) -> bool:
        return self.special is None

    @property
    def order_key(self) -> tuple[int, int]:
        """(level, strain rank) of a contract bid."""
        if not self.is_contract:
            raise ValueError(f"{self.token} is not a contract bid")
        return self.level, STRAINS.index(self.strain)

    def beats(self, other: "Bid") -> bool:
        """Check if this contract bid is higher than another contract bid."""
        return self.order_key > other.order_key

    @classmethod
    def from_token(cls, token: str) -> "Bid":
        text = str(token).strip()
        if text in SPECIAL_BIDS:
            return cls(special=text)
        if len(text) >= 2 and text[0].isdigit():
            level, strain = int(text[0]), text[1:]
            if strain.upper() == NO_TRUMP:
                strain = NO_TRUMP
            if 1 <= level <= 7 and strain in STRAINS:
                return cls(level=level, strain=strain)
        raise ValueError(f"Unknown bid: {token!r}")


PASS_BID = Bid(special=PASS)


def contract_bids():
    """All 35 contract bids, level by level, ♣ ♦ ♥ ♠ SA within a level."""
    for level in range(1, 8):
        for strain in STRAINS:
            yield Bid(level=level, strain=strain)


@dataclass(frozen=True)
class Vulnerability:
    ns: bool = False
    ew: bool = False

    def to_dict(self) -> dict:
        return {"NS": self.ns, "EW": self.ew}

    @classmethod
    def from_dict(cls, data) -> "Vulnerability":
        if not data:
            return cls()
        return cls(ns=bool(data.get("NS", False)), ew=bool(data.get("EW", False)))


def _pick(data: Mapping, *keys, default=None):
    """First present key among snake_case / camelCase spellings."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _check_hand(hand, allow_empty: bool = True):
    if isinstance(hand, (str, bytes)) or not isinstance(hand, Sequence):
        raise InvalidContextError("hand must be a sequence of cards")
    if not allow_empty and not hand:
        raise InvalidContextError("hand is empty")
    if len(hand) > MAX_HAND_SIZE:
        raise InvalidContextError(f"hand has {len(hand)} cards (max {MAX_HAND_SIZE})")
    for card in hand:
        _check_card(card)
    if len(set(hand)) != len(hand):
        raise InvalidContextError("hand contains duplicate cards")


def _check_card(card):
    if not isinstance(card, Card):
        raise InvalidContextError(f"not a card: {card!r}")
    if not isinstance(card.rank, int) or card.rank not in RANK_NAMES:
        raise InvalidContextError(f"unknown rank: {card.rank!r}")
    if not isinstance(card.suit, int) or card.suit not in SUIT_SYMBOLS:
        raise InvalidContextError(f"unknown suit: {card.suit!r}")


def _check_bid(bid):
    if not isinstance(bid, Bid):
        raise InvalidContextError(f"not a bid: {bid!r}")
    if bid.special is not None:
        if bid.special not in SPECIAL_BIDS:
            raise InvalidContextError(f"unknown call: {bid.special!r}")
    elif not isinstance(bid.level, int) or not 1 <= bid.level <= 7 or bid.strain not in STRAINS:
        raise InvalidContextError(f"not a contract bid: level {bid.level!r}, strain {bid.strain!r}")


def _check_position(value, name: str):
    if value not in POSITIONS:
        raise InvalidContextError(f"{name} must be one of {', '.join(POSITIONS)}, got {value!r}")


@dataclass(frozen=True)
class BiddingContext:
    """Everything the engine may read when choosing a bid."""
    hand: Sequence[Card]
    position: str
    dealer: str
    bids: Sequence[tuple[str, Bid]] = ()
    vulnerability: Vulnerability = field(default_factory=Vulnerability)
    last_bid: Optional[Bid] = None

    @property
    def has_prior_bid(self) -> bool:
        """True once any seat has made a contract bid."""
        if self.last_bid is not None and self.last_bid.is_contract:
            return True
        return any(bid.is_contract for _, bid in self.bids)

    def validate(self):
        _check_hand(self.hand)
        _check_position(self.position, "position")
        _check_position(self.dealer, "dealer")
        if not isinstance(self.vulnerability, Vulnerability):
            raise InvalidContextError("vulnerability must be a Vulnerability")
        for entry in self.bids:
            if not isinstance(entry, tuple) or len(entry) != 2:
                raise InvalidContextError(f"bid history entry must be (position, bid): {entry!r}")
            _check_position(entry[0], "bid position")
            _check_bid(entry[1])
        if self.last_bid is not None:
            _check_bid(self.last_bid)

    def to_dict(self) -> dict:
        return {
            "hand": [c.to_dict() for c in self.hand],
            "position": self.position,
            "dealer": self.dealer,
            "bids": [{"position": pos, "bid": bid.token} for pos, bid in self.bids],
            "vulnerability": self.vulnerability.to_dict(),
            "last_bid": self.last_bid.token if self.last_bid else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "BiddingContext":
        if not isinstance(data, Mapping):
            raise InvalidContextError("bidding context must be an object")
        try:
            bids = []
            for entry in data.get("bids") or []:
                if isinstance(entry, Mapping):
                    bids.append((entry["position"], Bid.from_token(entry["bid"])))
                else:
                    pos, token = entry
                    bids.append((pos, Bid.from_token(token)))
            last_bid = _pick(data, "last_bid", "lastBid")
            context = cls(
                hand=tuple(Card.from_dict(c) for c in data["hand"]),
                position=data["position"],
                dealer=data["dealer"],
                bids=tuple(bids),
                vulnerability=Vulnerability.from_dict(data.get("vulnerability")),
                last_bid=Bid.from_token(last_bid) if last_bid else None,
            )
        except KeyError as e:
            raise InvalidContextError(f"missing field {e.args[0]!r}") from e
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidContextError(str(e)) from e
        context.validate()
        return context


@dataclass(frozen=True)
class PlayContext:
    """Everything the engine may read when choosing a card."""
    hand: Sequence[Card]
    position: str
    trick: Mapping[str, Optional[Card]] = field(default_factory=dict)
    contract: str = ""
    trump_suit: Union[Suit, str, None] = None
    lead_suit: Optional[Suit] = None

    def legal_cards(self) -> list[Card]:
        """Cards that may be played: the lead suit if held, else any card."""
        if self.lead_suit is not None:
            following = [c for c in self.hand if c.suit == self.lead_suit]
            if following:
                return following
        return list(self.hand)

    def validate(self):
        _check_hand(self.hand, allow_empty=False)
        _check_position(self.position, "position")
        if not isinstance(self.trick, Mapping) or len(self.trick) > 4:
            raise InvalidContextError("trick must map at most four positions to cards")
        for pos, card in self.trick.items():
            _check_position(pos, "trick position")
            if card is not None:
                _check_card(card)
        if not isinstance(self.contract, str):
            raise InvalidContextError("contract must be a string")
        if self.trump_suit is not None and self.trump_suit != NO_TRUMP and not isinstance(self.trump_suit, Suit):
            raise InvalidContextError(f"unknown trump suit: {self.trump_suit!r}")
        if self.lead_suit is not None and not isinstance(self.lead_suit, Suit):
            raise InvalidContextError(f"unknown lead suit: {self.lead_suit!r}")

    def to_dict(self) -> dict:
        return {
            "hand": [c.to_dict() for c in self.hand],
            "position": self.position,
            "trick": {pos: c.to_dict() if c else None for pos, c in self.trick.items()},
            "contract": self.contract,
            "trump_suit": strain_label(self.trump_suit) if self.trump_suit is not None else None,
            "lead_suit": SUIT_SYMBOLS[self.lead_suit] if self.lead_suit else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "PlayContext":
        if not isinstance(data, Mapping):
            raise InvalidContextError("play context must be an object")
        try:
            trick = data.get("trick") or {}
            if not isinstance(trick, Mapping):
                raise InvalidContextError("trick must be an object")
            lead_suit = _pick(data, "lead_suit", "leadSuit")
            context = cls(
                hand=tuple(Card.from_dict(c) for c in data["hand"]),
                position=data["position"],
                trick={pos: Card.from_dict(c) if c else None for pos, c in trick.items()},
                contract=data.get("contract") or "",
                trump_suit=parse_trump(_pick(data, "trump_suit", "trumpSuit")),
                lead_suit=parse_suit(lead_suit) if lead_suit else None,
            )
        except KeyError as e:
            raise InvalidContextError(f"missing field {e.args[0]!r}") from e
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidContextError(str(e)) from e
        context.validate()
        return context


@dataclass(frozen=True)
class Outcome:
    """Result of one step of a decision: OK, remote unavailable, or invalid."""
    status: DecisionStatus
    value: Any = None
    reason: str = ""

    @property
    def is_ok(self) -> bool:
        return self.status == DecisionStatus.OK

    @classmethod
    def ok(cls, value) -> "Outcome":
        return cls(DecisionStatus.OK, value)

    @classmethod
    def unavailable(cls, reason: str) -> "Outcome":
        return cls(DecisionStatus.REMOTE_UNAVAILABLE, reason=reason)

    @classmethod
    def invalid(cls, reason: str) -> "Outcome":
        return cls(DecisionStatus.INVALID, reason=reason)


@dataclass(frozen=True)
class Decision:
    """The engine's answer: a bid token or a card, and where it came from."""
    value: Union[str, Card]
    source: str
    detail: str = ""

    def to_dict(self) -> dict:
        value = self.value.to_dict() if isinstance(self.value, Card) else self.value
        return {"value": value, "source": self.source, "detail": self.detail}
