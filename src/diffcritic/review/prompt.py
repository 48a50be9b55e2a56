"""Review prompt construction."""

from __future__ import annotations

NO_ISSUES_SENTINEL = "No critical issues found."

SYSTEM_PROMPT = (
    "You are a strict senior code reviewer. Report only real issues in the "
    "changed code, never praise. When there is nothing to report, answer with "
    f'exactly "{NO_ISSUES_SENTINEL}" and nothing else.'
)

# Review focus per lower-cased file extension.
EXTENSION_GUIDANCE: dict[str, str] = {
    ".py": "Python: check exception handling, mutable default arguments, resource cleanup and typing mistakes.",
    ".ts": "TypeScript: check type safety, unhandled promises, null/undefined access and misuse of any.",
    ".tsx": "React/TypeScript: check hook dependencies, state mutation, key props and type safety.",
    ".js": "JavaScript: check async error handling, equality pitfalls, undefined access and injection risks.",
    ".jsx": "React: check hook dependencies, state mutation, key props and unsafe HTML rendering.",
    ".java": "Java: check null handling, resource leaks, thread safety and exception swallowing.",
    ".go": "Go: check ignored errors, goroutine leaks, data races and defer misuse.",
    ".rs": "Rust: check unwrap/expect on fallible paths, unsafe blocks and needless cloning.",
    ".rb": "Ruby: check nil handling, SQL injection in queries and N+1 database access.",
    ".php": "PHP: check input validation, SQL injection, XSS and type juggling.",
    ".cs": "C#: check null references, IDisposable cleanup, async/await misuse and thread safety.",
    ".cpp": "C++: check memory ownership, undefined behavior, buffer overflows and exception safety.",
    ".c": "C: check buffer overflows, memory leaks, unchecked return values and integer overflow.",
    ".sql": "SQL: check injection risks, missing indexes, unbounded queries and transaction handling.",
    ".sh": "Shell: check unquoted variables, missing error handling (set -e) and command injection.",
}

PROMPT_TEMPLATE = """\
Review the following git diff of `{file_name}`.

Focus: {guidance}

Analyze only the changed lines and flag only critical issues:
- security vulnerabilities
- correctness bugs
- major performance problems
- serious style or best-practice violations

Do not include positive feedback, summaries or praise.

Respond in exactly one of these two forms:

1. If you find issues, a numbered list with one entry per issue:
   1. [Line N] Category - concise fix

2. If you find no issues, respond with exactly this text and nothing else:
   {sentinel}

```diff
{diff}
```
"""


def guidance_for(extension: str) -> str:
    """Return the review focus for a file extension such as ".ts"."""
    key = extension.lower()
    guidance = EXTENSION_GUIDANCE.get(key)
    if guidance is not None:
        return guidance
    label = key or "(no extension)"
    return f"{label} file: check for bugs, security issues and maintainability problems."


def build_prompt(file_name: str, extension: str, diff: str) -> str:
    """Embed the diff, file name and per-extension guidance in the review template."""
    return PROMPT_TEMPLATE.format(
        file_name=file_name,
        guidance=guidance_for(extension),
        sentinel=NO_ISSUES_SENTINEL,
        diff=diff,
    )


def is_clean_review(response: str) -> bool:
    """True when the response carries the no-issues sentinel.

    This is a substring match: a response with extra text around the
    sentinel still counts as clean.
    """
    return NO_ISSUES_SENTINEL in response
