import importlib
from enum import StrEnum
from typing import Annotated

from typer import Argument
from typer import BadParameter
from typer import Option
from typer import Typer

from .callback import CallbackDriver
from .computation import ComputationCompleted
from .corun import Corun
from .future import run_future_style
from .monitor import Monitor

app = Typer()


class Style(StrEnum):
    FUTURE = "future"
    CALLBACK = "callback"


def load_factory(target: str):
    """Import a computation factory given as 'module:attribute'."""
    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise BadParameter(f"Expected MODULE:FACTORY, got: {target}")
    factory = importlib.import_module(module_name)
    for name in attribute.split("."):
        factory = getattr(factory, name)
    return factory


@app.command()
def run(
    target: Annotated[
        str,
        Argument(
            help="Computation factory to run. Example: 'myapp.tasks:fetch_all'",
            metavar="MODULE:FACTORY",
        ),
    ],
    args: Annotated[
        list[str] | None,
        Argument(help="String arguments passed to the factory."),
    ] = None,
    style: Annotated[
        Style,
        Option(help="Which kind of awaitables the computation suspends on."),
    ] = Style.FUTURE,
):
    """Run a computation to completion.

    Future-style computations print their result.
    Callback-style computations report nothing.
    """
    factory = load_factory(target)
    corun = Corun()
    try:
        match style:
            case Style.FUTURE:
                with corun.activate():
                    future = run_future_style(factory, *(args or ()))
                print(future.result())
            case Style.CALLBACK:
                with corun.activate():
                    driver = CallbackDriver(
                        lambda: factory(*(args or ())),
                        name=getattr(factory, "__qualname__", None),
                    )
                    completions = corun.subscribe(
                        {ComputationCompleted}, id=driver.id
                    )
                    driver.start()
                # There is no result, only a signal that this computation
                # is over. Others it started may still be running.
                completions.get()
    finally:
        corun.shutdown()


@app.command()
def monitor(raw: bool = False):
    """Monitor computation events.

    Shows a live view of computations. Use --raw for detailed event output.
    """
    if raw:
        corun = Corun()
        events = corun.subscribe({object})
        try:
            while True:
                print(events.get())
        except KeyboardInterrupt:
            print("Shutting down gracefully.")
        finally:
            corun.shutdown()
    else:
        Monitor().run()


if __name__ == "__main__":
    app()
