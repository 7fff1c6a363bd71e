"""Declaration validation."""

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Sequence

from literature_server.errors import InvalidSetKey
from literature_server.models.card import Hand, SetKey, cards_in_set


@dataclass
class ValidationResult:
    """Result of declaration validation."""

    is_valid: bool
    error_message: str = ""

    def __bool__(self) -> bool:
        return self.is_valid


class DeclarationValidator:
    """Checks a claimed set assignment against the true hands.

    The check is all-or-nothing: a single misplaced card makes the whole
    declaration invalid.
    """

    def validate(
        self,
        set_key: SetKey | str,
        assignment: Mapping[str, Sequence[str]],
        hands: Mapping[str, Hand],
    ) -> ValidationResult:
        """Validate a declaration.

        Args:
            set_key: Set being declared.
            assignment: player_id -> card ids claimed to be in that hand.
            hands: Snapshot of player_id -> true hand.

        Returns:
            ValidationResult
        """
        try:
            set_cards = cards_in_set(set_key)
        except InvalidSetKey as e:
            return ValidationResult(is_valid=False, error_message=e.message)

        # Every card of the set exactly once, nothing else
        claimed = Counter(cid for ids in assignment.values() for cid in ids)
        expected = Counter(c.id for c in set_cards)
        if sum(claimed.values()) != len(set_cards):
            return ValidationResult(
                is_valid=False,
                error_message=(
                    f"Card count mismatch: {sum(claimed.values())} vs {len(set_cards)}"
                ),
            )
        if claimed != expected:
            return ValidationResult(
                is_valid=False,
                error_message="Assigned cards do not match the set",
            )

        # Every card where it was claimed to be
        for player_id, card_ids in assignment.items():
            hand = hands.get(player_id)
            if hand is None:
                return ValidationResult(
                    is_valid=False,
                    error_message=f"Unknown player in assignment: {player_id}",
                )
            for card_id in card_ids:
                if not hand.contains(card_id):
                    return ValidationResult(
                        is_valid=False,
                        error_message=f"Player {player_id} does not hold {card_id}",
                    )

        return ValidationResult(is_valid=True)


def validate_declaration(
    set_key: SetKey | str,
    assignment: Mapping[str, Sequence[str]],
    hands: Mapping[str, Hand],
) -> bool:
    """Shortcut returning only the verdict."""
    return DeclarationValidator().validate(set_key, assignment, hands).is_valid
