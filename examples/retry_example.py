"""Example demonstrating retries, classification and fallback."""

import asyncio

from mend import (
    FallbackConfig,
    classify_ai_error,
    complete_with_fallback,
    get_recovery_options,
    with_rate_limit_retry,
)


class HTTPStatusError(Exception):
    def __init__(self, message, status, headers=None):
        super().__init__(message)
        self.status = status
        self.headers = headers or {}


async def flaky_api_call(attempt_counter):
    """Simulates an API that is rate limited twice before answering."""
    attempt_counter[0] += 1
    print(f"  Attempt {attempt_counter[0]}...", end=" ")

    if attempt_counter[0] < 3:
        print("❌ 429 Too Many Requests")
        raise HTTPStatusError("Too Many Requests", 429, {"Retry-After": "1"})

    print("✅ Success!")
    return {"status": "ok", "data": "API response"}


async def main():
    print("🔄 Testing Retry Mechanism\n")

    # Example 1: Rate limited call that recovers
    print("Example 1: API that succeeds on 3rd attempt")
    attempt_counter = [0]
    result = await with_rate_limit_retry(
        flaky_api_call,
        {"max_retries": 3, "base_delay_ms": 200, "max_delay_ms": 500},
        attempt_counter,
        on_retry=lambda attempt, delay_ms, error: print(
            f"  ↻ retry {attempt} in {delay_ms:.0f}ms (status {error.status})"
        ),
    )
    print(f"  Result: {result.data} after {result.attempts} attempts, "
          f"{result.total_delay_ms:.0f}ms waiting\n")

    # Example 2: Classify a failure for the user
    print("Example 2: Classifying a timeout")
    ai_error = classify_ai_error(TimeoutError("Request timed out"))
    print(f"  {ai_error.category.value}: {ai_error.user_message}")
    for option in get_recovery_options(ai_error):
        marker = "→" if option.is_primary else " "
        print(f"  {marker} {option.label}: {option.description}")
    print()

    # Example 3: Fall back to an equivalent model
    print("Example 3: Falling back from a rate-limited model")

    async def complete(model):
        if model.startswith("gpt-"):
            raise Exception("Rate limit exceeded")
        return f"completion from {model}"

    fallback = await complete_with_fallback(complete, "gpt-4-turbo", FallbackConfig())
    print(f"  {fallback.data} (fallback used: {fallback.used_fallback})\n")

    print("✅ All examples completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
