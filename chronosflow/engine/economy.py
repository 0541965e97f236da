"""XP balance and spend ledger for ChronosFlow.

balance = total_xp - spent_xp, where spent_xp only ever grows.
"""

import logging
from typing import Optional

from chronosflow.models.reward import Reward
from chronosflow.models.state import AppState

logger = logging.getLogger(__name__)


def balance(total_xp: int, spent_xp: int) -> int:
    """Spendable XP (negative if XP dropped below what was already spent)."""
    return total_xp - spent_xp


def can_redeem(reward: Reward, total_xp: int, spent_xp: int) -> bool:
    """Whether the current balance covers the reward's cost."""
    return balance(total_xp, spent_xp) >= reward.cost


def redeem_reward(state: AppState, reward_id: str, total_xp: int) -> Optional[AppState]:
    """Buy a reward as a single state transition.

    The spend ledger and the reward's redemption count change together in the
    returned snapshot; the input state is left untouched.

    Args:
        state: Current application state
        reward_id: Reward to buy
        total_xp: XP total computed from the current state

    Returns:
        New state, or None if the reward is unknown or the balance is too low
    """
    reward = next((r for r in state.rewards if r.id == reward_id), None)
    if reward is None:
        return None

    if not can_redeem(reward, total_xp, state.spent_xp):
        logger.debug(
            f"Redemption of reward {reward_id} refused: balance "
            f"{balance(total_xp, state.spent_xp)} < cost {reward.cost}"
        )
        return None

    rewards = [
        r.model_copy(update={"redemption_count": r.redemption_count + 1}) if r.id == reward_id else r
        for r in state.rewards
    ]
    return state.model_copy(update={"rewards": rewards, "spent_xp": state.spent_xp + reward.cost})
