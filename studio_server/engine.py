"""Decision engine — picks a bid or a card for one seat.

The remote model is asked first when an API key is configured. Whatever
happens to that call, the engine answers: a failed call falls back to the
local rules, an unreadable bid reads as Passe, an unreadable card falls back
to the local play rule. Only a malformed context raises.
"""
import logging

from .config import get_openai_config
from .decision_logger import DecisionLogger
from .errors import InvalidContextError, RemoteDecisionError
from .heuristics import choose_bid, choose_card
from .models import (
    BiddingContext, Card, Decision, DecisionStatus, Outcome, PlayContext,
    PASS, SOURCE_HEURISTIC, SOURCE_REMOTE, SOURCE_REMOTE_INVALID, hand_label,
)
from .openai_client import ChatCompletionClient
from .prompts import (
    BID_MAX_TOKENS, BID_RULES, DECISION_TEMPERATURE, PLAY_MAX_TOKENS, PLAY_RULES,
    format_bidding_context, format_play_context,
)
from .validator import validate_bid, validate_card

logger = logging.getLogger(__name__)


class DecisionEngine:
    """Answers bid and card requests; stateless between calls."""

    def __init__(self, api_key: str = '', client=None, decision_log: DecisionLogger = None,
                 **client_options):
        if client is None and api_key:
            client = ChatCompletionClient(api_key, **client_options)
        self.client = client
        self.decision_log = decision_log

    @classmethod
    def from_config(cls, config: dict = None, decision_log: DecisionLogger = None) -> "DecisionEngine":
        c = config or get_openai_config()
        return cls(c['api_key'], decision_log=decision_log, api_url=c['api_url'],
                   model=c['model'], timeout=c['timeout'])

    @property
    def is_remote_configured(self) -> bool:
        return self.client is not None

    # === Public API ===

    def decide_bid(self, context: BiddingContext, decision_log: DecisionLogger = None) -> str:
        """Return a bid token: '1♠', '3SA', 'Passe', 'Contre' or 'Surcontre'."""
        return self.advise_bid(context, decision_log).value

    def decide_play(self, context: PlayContext, decision_log: DecisionLogger = None) -> Card:
        """Return a card from context.hand, following suit when possible."""
        return self.advise_play(context, decision_log).value

    def advise_bid(self, context: BiddingContext, decision_log: DecisionLogger = None) -> Decision:
        """Choose a bid and report whether it came from the model or the local rules."""
        _require(context, BiddingContext)

        remote = self._ask_remote(BID_RULES, format_bidding_context(context), BID_MAX_TOKENS)
        if remote.status == DecisionStatus.REMOTE_UNAVAILABLE:
            decision = Decision(choose_bid(context), SOURCE_HEURISTIC, remote.reason)
        else:
            parsed = validate_bid(remote.value)
            if parsed.status == DecisionStatus.OK:
                decision = Decision(parsed.value, SOURCE_REMOTE)
            else:
                logger.warning("Unreadable bid from model, passing: %s", parsed.reason)
                decision = Decision(PASS, SOURCE_REMOTE_INVALID, parsed.reason)

        self._log(decision_log,
                  f"bid {context.position}: {hand_label(context.hand)} | "
                  + (", ".join(f"{p}:{b.token}" for p, b in context.bids) or "-"),
                  f"{decision.value} ({decision.source})")
        return decision

    def advise_play(self, context: PlayContext, decision_log: DecisionLogger = None) -> Decision:
        """Choose a card and report whether it came from the model or the local rules."""
        _require(context, PlayContext)

        remote = self._ask_remote(PLAY_RULES, format_play_context(context), PLAY_MAX_TOKENS)
        if remote.status == DecisionStatus.REMOTE_UNAVAILABLE:
            decision = Decision(choose_card(context.hand, context.lead_suit), SOURCE_HEURISTIC,
                                remote.reason)
        else:
            parsed = validate_card(remote.value, context.hand, context.lead_suit)
            if parsed.status == DecisionStatus.OK:
                decision = Decision(parsed.value, SOURCE_REMOTE)
            else:
                logger.warning("Unreadable card from model, using local rule: %s", parsed.reason)
                decision = Decision(choose_card(context.hand, context.lead_suit),
                                    SOURCE_REMOTE_INVALID, parsed.reason)

        trick = ", ".join(f"{p}:{c.label}" for p, c in context.trick.items() if c) or "-"
        self._log(decision_log,
                  f"play {context.position}: {hand_label(context.hand)} | {trick}",
                  f"{decision.value.label} ({decision.source})")
        return decision

    # === Helpers ===

    def _ask_remote(self, system: str, user: str, max_tokens: int) -> Outcome:
        if self.client is None:
            return Outcome.unavailable("no API key configured")
        try:
            text = self.client.complete(system, user, temperature=DECISION_TEMPERATURE,
                                        max_tokens=max_tokens)
        except RemoteDecisionError as e:
            logger.warning("Remote decision failed, using local rules: %s", e)
            return Outcome.unavailable(f"{type(e).__name__}: {e}")
        except Exception as e:
            # Injected clients may fail outside the RemoteDecisionError family
            logger.exception("Completion client raised unexpectedly, using local rules")
            return Outcome.unavailable(f"{type(e).__name__}: {e}")
        return Outcome.ok(text)

    def _log(self, decision_log, asked: str, decided: str):
        log = decision_log or self.decision_log
        if log is not None:
            log.log_step(asked, decided)


def _require(context, expected: type):
    if not isinstance(context, expected):
        raise InvalidContextError(f"expected {expected.__name__}, got {type(context).__name__}")
    context.validate()
