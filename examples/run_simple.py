# examples/run_simple.py

import logging
import os
import matplotlib.pyplot as plt

from simple_swap.models.swap_model import SwapModel
from simple_swap.utils.config_parser import load_config


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # 1. Locate and load the YAML configuration (trade scripts resolve next to it)
    script_dir = os.path.dirname(os.path.abspath(__file__))
    config = load_config(os.path.join(script_dir, "config_simple.yaml"))

    # 2. Instantiate the SwapModel
    model = SwapModel(config)

    # 3. Run the simulation for the specified number of steps
    for _ in range(model.num_steps):
        model.step()

    # 4. Retrieve a DataFrame of collected pool metrics
    df = model.datacollector.get_model_vars_dataframe()

    print("\n=== Final pool metrics (last 5 steps) ===")
    print(df.tail())

    # 5. Rejected swaps per trader
    print("\n=== Rejected swaps ===")
    for trader in model.traders:
        log = trader.trade_log()
        rejected = log[log["status"] != "ok"]
        print(f"{trader.account}: {len(rejected)} of {len(log)}")
        if not rejected.empty:
            print(rejected["status"].value_counts().to_string())

    # 6. Plot reserves and price
    fig, ax1 = plt.subplots(figsize=(8, 4))
    ax1.plot(df.index, df["Reserve_A"], label="Reserve A", color="tab:blue")
    ax1.plot(df.index, df["Reserve_B"], label="Reserve B", color="tab:green")
    ax1.set_xlabel("Block")
    ax1.set_ylabel("Reserves")

    ax2 = ax1.twinx()
    ax2.plot(df.index, df["Price"], label="Price A/B", color="tab:orange", linestyle="--")
    ax2.set_ylabel("Price", color="tab:orange")
    ax2.tick_params(axis="y", labelcolor="tab:orange")

    fig.suptitle("Pool Reserves and Price Over Time")
    fig.tight_layout()
    fig.legend(loc="upper left")
    plt.show()


if __name__ == "__main__":
    main()
