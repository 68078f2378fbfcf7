import asyncio

from mc_trading.runtime import ServiceConfig, SimulationService
from mc_trading.simulator import CompoundingFrequency, StrategyParams, extreme_path


params = StrategyParams(
    initial_capital=50000,
    risk_percentage=1,
    risk_reward_ratio=3,
    win_rate=30,
    trades_per_month=7,
    time_months=36,
    risk_cap_dollars=3000,
    compounding_frequency=CompoundingFrequency.QUARTERLY,
)

best = extreme_path(params, win=True)
print("All wins, first quarter:", [point.capital for point in best.monthly_data[:4]])


async def main() -> None:
    service = SimulationService(ServiceConfig(batch_size=5000, max_workers=4))
    report = await service.run(params, 20000)
    if report.error:
        print("Simulation failed:", report.error)
        return
    summary = report.summary
    print("Mean:", round(summary.mean, 2))
    print("Median:", round(summary.median, 2))
    print("10th-90th:", round(summary.p10, 2), "-", round(summary.p90, 2))
    print("Worst/best:", round(summary.worst, 2), "/", round(summary.best, 2))
    print("All wins/all losses:", round(summary.all_wins_capital, 2), "/", round(summary.all_losses_capital, 2))
    print("EV per trade:", round(report.outlook.expected_value_per_trade, 2))
    print("Chart points:", len(report.chart))


if __name__ == "__main__":
    asyncio.run(main())
