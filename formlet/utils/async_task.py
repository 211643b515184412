import asyncio
from typing import Callable, Dict, Optional, Tuple

from formlet.log import get_logger

logger = get_logger(__name__)


class AsyncTask:
    """
    Bridges coroutine-based collaborators (such as an uploader) to the
    callback style the form controller uses for completions.
    """

    @staticmethod
    def run(
            coroutine_func: Callable,
            args: Tuple = (),
            kwargs: Dict = None,
            on_success: Optional[Callable] = None,
            on_error: Optional[Callable] = None,
            on_complete: Optional[Callable] = None,
    ) -> asyncio.Task:
        """
        Run an asynchronous function with callbacks for success, error, and completion.

        Args:
            coroutine_func: The async function to run
            args: Positional arguments to pass to the function
            kwargs: Keyword arguments to pass to the function
            on_success: Callback function that receives the result when successful
            on_error: Callback function that receives the exception when failed
            on_complete: Callback function called regardless of success/failure

        Returns:
            The created asyncio.Task object. Must be called with a running loop.
        """
        if kwargs is None:
            kwargs = {}

        async def _wrapped_coroutine():
            try:
                result = await coroutine_func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug("Async task failed", task=getattr(coroutine_func, "__name__", repr(coroutine_func)), error=str(e))
                if on_error is not None:
                    on_error(e)
                return None
            else:
                if on_success is not None:
                    on_success(result)
                return result
            finally:
                if on_complete is not None:
                    on_complete()

        return asyncio.create_task(_wrapped_coroutine())


run_async = AsyncTask.run
