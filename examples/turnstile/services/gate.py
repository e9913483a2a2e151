"""
Drive the generated turnstile machine from a stream of sensor readings.

Run `smc build` in the example directory first, then:

    python -m services.gate
"""

from generated import turn_stile as ts

MAX_COINS = 3


@ts.Coin.guard
def coin_inserted(coins: int, pushed: bool) -> bool:
    return 0 < coins <= MAX_COINS


@ts.Push.guard
def arm_pushed(coins: int, pushed: bool) -> bool:
    return pushed


@ts.Jam.guard
def jammed(coins: int, pushed: bool) -> bool:
    return coins > MAX_COINS


@ts.Coin.on_action
def log_coin(log: list[str]) -> None:
    log.append("coin accepted")


@ts.Push.on_action
def log_push(log: list[str]) -> None:
    log.append("passenger through")


def run(readings: list[tuple[int, bool]]) -> tuple[ts.VariantTag, list[str]]:
    log: list[str] = []
    variant = ts.Machine.new(ts.Closed).as_variant()
    for coins, pushed in readings:
        variant = ts.eval_machine(variant, coins, pushed, log)
    return variant.tag, log


if __name__ == "__main__":
    tag, log = run([(1, False), (0, True), (5, False)])
    print(tag.value)
    print("\n".join(log))
