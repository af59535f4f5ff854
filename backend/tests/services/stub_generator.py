"""Stub TextGenerator — scripted generation service for generator and route tests.

Invariants:
    - Each generate() call consumes one scripted outcome: str → returned,
      exception instance → raised, coroutine function → awaited
    - Calls recorded as (system, user, max_tokens) tuples
"""

import json


class StubTextGenerator:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[str, str, int]] = []

    def script(self, *outcomes) -> None:
        self.outcomes.extend(outcomes)

    async def generate(self, system: str, user: str, max_tokens: int) -> str:
        self.calls.append((system, user, max_tokens))
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        if callable(outcome):
            return await outcome()
        return outcome


def valid_challenge_json(title: str = "Two Sum") -> str:
    return json.dumps({
        "title": title,
        "difficultyLevel": "Easy",
        "description": "Find two numbers that add up to a target.",
        "inputFormat": "n, the array, then the target",
        "outputFormat": "Two indices",
        "constraints": "2 <= n <= 10^4",
        "publicTestCases": [
            {"input": "4\n2 7 11 15\n9", "output": "0 1"},
            {"input": "3\n3 2 4\n6", "output": "1 2"},
        ],
        "privateTestCases": [
            {"input": "2\n3 3\n6", "output": "0 1"},
            {"input": "4\n1 2 3 4\n7", "output": "2 3"},
            {"input": "3\n-1 -2 -3\n-5", "output": "1 2"},
            {"input": "5\n5 1 9 2 8\n10", "output": "1 2"},
        ],
        "edgeCases": [{"input": "2\n0 0\n0", "output": "0 1"}],
        "explanation": "Hash map of seen values, O(n).",
    })


VALID_MCQ_TEXT = """TITLE: SQL Joins
DIFFICULTY: Medium
QUESTION: Which join returns only matching rows?

```sql
select * from a inner join b on a.id = b.id
```

OPTIONS:
A: LEFT JOIN
B: INNER JOIN
C: FULL OUTER JOIN
D: CROSS JOIN
CORRECT: B
EXPLANATION: An inner join keeps only rows with a match on both sides."""
