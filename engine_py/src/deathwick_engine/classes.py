"""
Class capability records.

Each class is a single data record: numeric/boolean modifiers the resolver
consults, plus optional hook functions run at fixed points of an effect.
Classes without a given hook fall back to the base rule.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .models import Card, GameState, Player

GRIMOIRE = 'THE GRIMOIRE OF REJECTION'
WARLOCK = 'THE WARLOCK'
VOODOO_DOLL = 'THE VOODOO DOLL'
OCCULTIST = 'THE OCCULTIST'
MEDDLER = 'THE MEDDLER'
WITNESS = 'THE WITNESS'
ORACLE = 'THE ORACLE'
MIMIC = 'THE MIMIC'
EXTORTIONER = 'THE EXTORTIONER'
VULTURE = 'THE VULTURE'
USERER = 'THE USERER'
SEALBINDER = 'THE SEALBINDER'
SADIST = 'THE SADIST'
REAPER = 'THE REAPER'
PYROMANIAC = 'THE PYROMANIAC'
MIME = 'THE MIME'
INQUISITOR = 'THE INQUISITOR'
GRAVEDIGGER = 'THE GRAVEDIGGER'
GATEKEEPER = 'THE GATEKEEPER'
FUNERAL_BELL = 'THE FUNERAL BELL'
CRYPTKEEPER = 'THE CRYPTKEEPER'
CROW = 'THE CROW'
WATCHER = 'THE WATCHER'
VESSEL = 'THE VESSEL'
SILENCE = 'THE SILENCE'
RAVENOUS = 'THE RAVENOUS'
PLAGUE = 'THE PLAGUE'
LICH = 'THE LICH'
HOARDER = 'THE HOARDER'
DOOMREADER = 'THE DOOMREADER'
CLOWN = 'THE CLOWN'
UNSEEN = 'THE UNSEEN'
SUFFERER = 'THE SUFFERER'
SKEPTIC = 'THE SKEPTIC'
PRIEST = 'THE PRIEST'
LEECH = 'THE LEECH'
HEX = 'THE HEX'
EXORCIST = 'THE EXORCIST'


@dataclass
class HookContext:
    """What a hook sees about the effect being resolved."""
    actor: Player
    card: Card
    target: Optional[Player] = None
    action: str = "cast"  # cast|haunt|banish


Hook = Callable[[GameState, HookContext], None]


@dataclass(frozen=True)
class ClassCapability:
    name: str
    description: str
    extended: bool = False
    # modifiers
    burn_reduction: int = 0
    hand_limit: Optional[int] = None
    scare_discards: int = 1
    sight_takes: int = 1
    sight_both_neighbors: bool = False
    greed_steals: bool = False
    possess_any_player: bool = False
    haunts_with_faces: bool = False
    always_siphon: bool = False
    exorcist_cleanse: bool = False
    # predicates / immunities
    drain_immune: bool = False
    possess_immune: bool = False
    seals_ghosts: bool = False
    ghosts_need_face_or_seven: bool = False
    silences_reactions: bool = False
    cannot_win: bool = False
    # reactive triggers
    hex_cancel: bool = False
    redirect: bool = False
    discard_cancel: bool = False
    wall_block: bool = False
    collects_burned_faces: bool = False
    draws_on_burn: bool = False
    draws_after_banish: bool = False
    spreads_banished: bool = False
    reaps_banished: bool = False
    scavenges_on_death: bool = False
    inherits_deck: bool = False
    tolls_on_death: bool = False
    revives_once: bool = False
    peeks_deck_top: bool = False
    binds_suits: bool = False
    # active ability key, resolved by abilities.ABILITIES
    ability: Optional[str] = None
    # hooks, in resolution order
    target_reactive: Optional[Hook] = None
    actor_post: Optional[Hook] = None


def _voodoo_backlash(state: GameState, ctx: HookContext):
    """The attacker burns 1 when a bound suit lands on the doll."""
    from .evaluator import handle_death
    from .zones import burn

    if ctx.card.suit in ctx.target.bound_suits:
        state.add_log(f"{ctx.actor.name} feels the pins of {ctx.target.name}'s doll and burns 1.")
        if not burn(state, ctx.actor, 1):
            state.last_attacker[ctx.actor.id] = ctx.target.id
            handle_death(state, ctx.actor)


def _meddle(state: GameState, ctx: HookContext):
    """After a landed haunt the target's deck top goes to the bottom."""
    if ctx.action != "haunt" or ctx.target is None:
        return
    if len(ctx.target.deck) > 1:
        ctx.target.deck.append(ctx.target.deck.pop(0))
        state.add_log(f"{ctx.actor.name} meddles with {ctx.target.name}'s deck.")


def _occultist_bonus(state: GameState, ctx: HookContext):
    """Possessing a non-neighbour heals 1 from the discard top, once per turn."""
    from .seating import is_neighbor

    actor, target = ctx.actor, ctx.target
    if ctx.action != "cast" or target is None or ctx.card.rank != "9" or actor.occultist_bonus_used:
        return
    if is_neighbor(state, actor, target) or not state.discard:
        return
    actor.occultist_bonus_used = True
    actor.deck.append(state.discard.pop())
    state.add_log(f"{actor.name} draws power from a distant possession: +1 to deck.")


CLASSES: List[ClassCapability] = [
    ClassCapability(GRIMOIRE, "Once per turn write down a rank; the next card of that rank played is cancelled.",
                    ability='grimoire'),
    ClassCapability(WARLOCK, "May haunt with face cards and jokers; such ghosts count as 10.",
                    haunts_with_faces=True),
    ClassCapability(VOODOO_DOLL, "Bind two suits; whoever haunts you with a bound suit burns 1.",
                    binds_suits=True, target_reactive=_voodoo_backlash),
    ClassCapability(OCCULTIST, "Possess any player; possessing a non-neighbour heals 1 once per turn.",
                    extended=True, possess_any_player=True, actor_post=_occultist_bonus),
    ClassCapability(MEDDLER, "After you haunt, the target's deck top goes to the bottom.",
                    extended=True, actor_post=_meddle),
    ClassCapability(WITNESS, "Cannot win. If two remain and one is you, the other falls too.",
                    cannot_win=True),
    ClassCapability(ORACLE, "At the start of your turn you may put your deck top on the bottom.",
                    extended=True, peeks_deck_top=True),
    ClassCapability(MIMIC, "Once per game swap decks with a neighbour.",
                    extended=True, ability='mimic'),
    ClassCapability(EXTORTIONER, "Sight takes two cards.", sight_takes=2),
    ClassCapability(VULTURE, "When a neighbour dies take 5 random cards from the discard into your deck.",
                    extended=True, scavenges_on_death=True),
    ClassCapability(USERER, "Swap a hand card for a chosen card from a neighbour's hand.",
                    extended=True, ability='userer'),
    ClassCapability(SEALBINDER, "Ghosts you attach cannot be recalled or possessed away.",
                    extended=True, seals_ghosts=True),
    ClassCapability(SADIST, "Scare makes the target discard two.", scare_discards=2),
    ClassCapability(REAPER, "A neighbour's banished ghost comes to your deck.",
                    extended=True, reaps_banished=True),
    ClassCapability(PYROMANIAC, "Discard a heart or diamond to make a neighbour burn 2.",
                    extended=True, ability='pyromaniac'),
    ClassCapability(MIME, "Discard a card to redirect a haunt to your other neighbour.",
                    extended=True, redirect=True),
    ClassCapability(INQUISITOR, "Discard a card to inspect a neighbour's hand; a face card there burns them 2.",
                    extended=True, ability='inquisitor'),
    ClassCapability(GRAVEDIGGER, "Inherit a dead neighbour's deck.",
                    extended=True, inherits_deck=True),
    ClassCapability(GATEKEEPER, "Immune to possess and mirror.",
                    extended=True, possess_immune=True),
    ClassCapability(FUNERAL_BELL, "Once per turn, when anyone dies, every other player burns 1.",
                    extended=True, tolls_on_death=True),
    ClassCapability(CRYPTKEEPER, "Play cards as walls; trade a wall to stop a haunt.",
                    wall_block=True, ability='cryptkeeper'),
    ClassCapability(CROW, "Face cards your neighbours burn come to your hand.",
                    extended=True, collects_burned_faces=True),
    ClassCapability(WATCHER, "Sight views both neighbours and takes one card.", sight_both_neighbors=True),
    ClassCapability(VESSEL, "Burn one fewer card each turn.", burn_reduction=1),
    ClassCapability(SILENCE, "Your haunts cannot be salted.", silences_reactions=True),
    ClassCapability(RAVENOUS, "Greed steals a random card from a neighbour instead of drawing.",
                    greed_steals=True),
    ClassCapability(PLAGUE, "Ghosts you attach spread when banished to the owner's other neighbour.",
                    extended=True, spreads_banished=True),
    ClassCapability(LICH, "Return once from death, stealing 2 deck cards from everyone.",
                    extended=True, revives_once=True),
    ClassCapability(HOARDER, "Hand limit 8.", extended=True, hand_limit=8),
    ClassCapability(DOOMREADER, "Once per turn discard a card to shift one of your ghosts' suit.",
                    ability='doomreader'),
    ClassCapability(CLOWN, "Ghosts you attach can only be banished by face cards or sevens.",
                    ghosts_need_face_or_seven=True),
    ClassCapability(UNSEEN, "Once per turn discard a card to cancel a haunt.", discard_cancel=True),
    ClassCapability(SUFFERER, "Draw 1 after each card burned at the start of your turn.", draws_on_burn=True),
    ClassCapability(SKEPTIC, "Immune to drain.", drain_immune=True),
    ClassCapability(PRIEST, "After a banish that does not siphon you may draw 1.",
                    draws_after_banish=True),
    ClassCapability(LEECH, "Every banish and cleanse siphons (except spades).", always_siphon=True),
    ClassCapability(HEX, "Discard a card of the same rank to cancel a haunt.", hex_cancel=True),
    ClassCapability(EXORCIST, "Cleanse removes two ghosts and siphons one.", exorcist_cleanse=True),
]

CLASS_REGISTRY: Dict[str, ClassCapability] = {c.name: c for c in CLASSES}

# Used for players whose class is not chosen yet
NO_CLASS = ClassCapability('', '')


def capability(player: Optional[Player]) -> ClassCapability:
    if player is None or player.class_name is None:
        return NO_CLASS
    return CLASS_REGISTRY.get(player.class_name, NO_CLASS)


def class_pool(include_extended: bool) -> List[str]:
    return [c.name for c in CLASSES if include_extended or not c.extended]


def hand_limit(state: GameState, player: Player) -> int:
    return capability(player).hand_limit or state.hand_limit
