"""
Game rule configuration and validation.
"""

from pydantic import BaseModel, Field, field_validator


class RuleConfig(BaseModel):
    """Configuration for the ritual's rules and table settings."""

    alternate_ruleset: bool = Field(
        default=False,
        description="Dark ritual: instant possession and ghost salvage on death"
    )
    min_players: int = Field(
        default=2,
        ge=2,
        le=12,
        description="Minimum number of players required to start"
    )
    max_players: int = Field(
        default=12,
        ge=2,
        le=12,
        description="Maximum number of players allowed"
    )
    cards_per_player: int = Field(
        default=27,
        ge=4,
        le=40,
        description="Cards dealt into each player's deck"
    )
    opening_hand: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Cards drawn from the deck into the opening hand"
    )
    hand_limit: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Hand size enforced at the end of a turn"
    )
    class_offer_count: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many classes each player may choose from"
    )
    extended_class_threshold: int = Field(
        default=6,
        ge=2,
        le=12,
        description="Extended classes join the pool above this many players"
    )
    allow_bots: bool = Field(
        default=True,
        description="Whether simulated opponents may take seats"
    )
    bot_delay_ms: int = Field(
        default=600,
        ge=0,
        le=10000,
        description="Pacing delay between simulated actions (presentation only)"
    )

    @field_validator('max_players')
    @classmethod
    def validate_max_players(cls, v, info):
        """Validate maximum players doesn't fall below the minimum."""
        min_players = info.data.get('min_players', 2)
        if v < min_players:
            raise ValueError(f'max_players ({v}) must be >= min_players ({min_players})')
        return v

    def validate_player_count(self, player_count: int) -> bool:
        """Check if a player count is valid for this configuration."""
        return self.min_players <= player_count <= self.max_players

    def deck_count(self, player_count: int) -> int:
        """Standard decks shuffled together: one per two players, rounded up."""
        return -(-player_count // 2)

    def joker_count(self, player_count: int) -> int:
        if player_count <= 8:
            return 2 * self.deck_count(player_count)
        return 9 + (player_count - 9) // 2

    def uses_extended_classes(self, player_count: int) -> bool:
        return player_count > self.extended_class_threshold


# Default rule configuration
default_rules = RuleConfig()


def create_rules(**overrides) -> RuleConfig:
    """Create a rule configuration with overrides."""
    return RuleConfig(**{**default_rules.model_dump(), **overrides})
