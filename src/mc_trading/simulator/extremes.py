"""Deterministic best/worst-case trajectories and sizing outlook."""

from __future__ import annotations

from mc_trading.simulator.models import SimulatedPath, StrategyOutlook, StrategyParams
from mc_trading.simulator.trajectory import simulate_path, sizing_for


def extreme_path(params: StrategyParams, win: bool) -> SimulatedPath:
    return simulate_path(params, lambda: win)


def all_wins_capital(params: StrategyParams) -> float:
    return extreme_path(params, win=True).final_capital


def all_losses_capital(params: StrategyParams) -> float:
    return extreme_path(params, win=False).final_capital


def strategy_outlook(params: StrategyParams) -> StrategyOutlook:
    initial = sizing_for(params.initial_capital, params)
    win_probability = params.win_rate / 100.0
    expected_value = win_probability * initial.reward - (1 - win_probability) * initial.risk

    # Capital level at which the percentage risk first exceeds the dollar cap.
    cap_activation = None
    uncapped_risk = params.initial_capital * params.risk_percentage / 100.0
    if params.risk_percentage > 0 and uncapped_risk < params.risk_cap_dollars:
        cap_activation = params.risk_cap_dollars / (params.risk_percentage / 100.0)

    return StrategyOutlook(
        initial_risk=initial.risk,
        initial_reward=initial.reward,
        expected_value_per_trade=expected_value,
        total_trades=params.total_trades,
        cap_activation_capital=cap_activation,
    )
