"""System instructions and context formatting for the bridge decision prompts."""
from .models import (
    BiddingContext, PlayContext,
    POSITIONS, SUIT_SYMBOLS, hand_label, strain_label,
)
from .heuristics import high_card_points

DECISION_TEMPERATURE = 0.3
BID_MAX_TOKENS = 10
PLAY_MAX_TOKENS = 10

BID_RULES = """Tu es un joueur de bridge expert qui applique la Standard Française (SEF).
On te donne ta main, ta position, le donneur, la vulnérabilité et les enchères déjà faites.
Choisis l'enchère que tu fais maintenant.
Réponds UNIQUEMENT par une enchère, sans explication :
- une enchère de 1 à 7 suivie de ♣, ♦, ♥, ♠ ou SA (par exemple 1♠, 2SA, 3♦),
- ou Passe, Contre, Surcontre.
Ton enchère doit être plus haute que la dernière enchère faite."""

PLAY_RULES = """Tu es un joueur de bridge expert qui joue la carte.
On te donne ta main, le contrat, l'atout, la couleur entamée et les cartes déjà posées dans la levée.
Tu dois fournir dans la couleur entamée si tu le peux.
Réponds UNIQUEMENT par une carte de ta main, rang puis symbole de couleur, sans explication
(par exemple A♠, 10♥, 7♣)."""

POSITION_NAMES = {
    "N": "Nord",
    "E": "Est",
    "S": "Sud",
    "W": "Ouest",
}


def _yes_no(flag: bool) -> str:
    return "oui" if flag else "non"


def format_bidding_context(context: BiddingContext) -> str:
    """User message for a bid request."""
    history = ", ".join(f"{pos}: {bid.token}" for pos, bid in context.bids) or "aucune"
    last_bid = context.last_bid.token if context.last_bid else "aucune"
    lines = [
        f"Ma main : {hand_label(context.hand)}",
        f"Points d'honneur : {high_card_points(context.hand)}",
        f"Ma position : {POSITION_NAMES[context.position]} ({context.position})",
        f"Donneur : {POSITION_NAMES[context.dealer]} ({context.dealer})",
        f"Vulnérabilité : NS {_yes_no(context.vulnerability.ns)}, EO {_yes_no(context.vulnerability.ew)}",
        f"Enchères : {history}",
        f"Dernière enchère : {last_bid}",
        "Quelle est mon enchère ?",
    ]
    return "\n".join(lines)


def format_play_context(context: PlayContext) -> str:
    """User message for a card request."""
    played = [
        f"{pos}: {context.trick[pos].label}"
        for pos in POSITIONS
        if context.trick.get(pos) is not None
    ]
    lead = SUIT_SYMBOLS[context.lead_suit] if context.lead_suit else "aucune (j'entame)"
    lines = [
        f"Ma main : {hand_label(context.hand)}",
        f"Ma position : {POSITION_NAMES[context.position]} ({context.position})",
        f"Contrat : {context.contract or 'inconnu'}",
        f"Atout : {strain_label(context.trump_suit)}",
        f"Couleur entamée : {lead}",
        f"Levée en cours : {', '.join(played) or 'vide'}",
        "Quelle carte dois-je jouer ?",
    ]
    return "\n".join(lines)
