"""Context detector.

Guesses what the user is doing from the active tab or window title using
keyword matching only. Families are checked in order; the first hit wins.
"""

from pydantic import BaseModel


class DetectedContext(BaseModel):
    likely_task: str | None = None
    category: str | None = None
    confidence: int = 0  # 0-100
    reason: str


# (task, confidence, reason, keywords)
TASK_PATTERNS: list[tuple[str, int, str, tuple[str, ...]]] = [
    ("Coding", 75, "Detected coding environment", (
        "github", "gitlab", "stack overflow", "codepen", "codesandbox",
        "vscode", "visual studio code", "code editor",
    )),
    ("Email Work", 70, "Detected email client", (
        "gmail", "outlook", "mail", "email", "yahoo mail",
    )),
    ("Writing / Documentation", 70, "Detected document/writing tool", (
        "docs.google", "google docs", "notion", "confluence", "word",
        "document", "writing",
    )),
    ("Admin Work", 65, "Detected admin/spreadsheet tool", (
        "sheets.google", "excel", "spreadsheet", "admin",
    )),
    ("Planning / Notes", 65, "Detected note-taking/planning tool", (
        "obsidian", "evernote", "onenote", "notes", "planning",
    )),
    ("Watching Videos", 80, "Detected video platform", (
        "youtube", "vimeo", "netflix", "twitch", "streaming",
    )),
    ("Social Media", 75, "Detected social media platform", (
        "facebook", "twitter", "x.com", "instagram", "linkedin", "reddit", "tiktok",
    )),
    ("Meeting / Call", 70, "Detected meeting/call platform", (
        "zoom", "meet", "teams", "webex", "call", "meeting",
    )),
    ("Design Work", 70, "Detected design tool", (
        "figma", "adobe", "canva", "sketch", "design",
    )),
]

# (category, keywords) checked against the detected task name
CATEGORY_PATTERNS: list[tuple[str, tuple[str, ...]]] = [
    ("deep_work", ("coding", "development", "programming")),
    ("revenue", ("design", "writing", "documentation")),
    ("admin", ("admin", "email", "meeting", "call")),
    ("personal", ("social media", "watching videos", "entertainment")),
    ("learning", ("learning", "study", "reading")),
]


def detect_likely_task(active_tab: str, is_idle: bool) -> DetectedContext:
    if is_idle:
        return DetectedContext(reason="User is idle")

    tab = (active_tab or "").lower()
    for task, confidence, reason, keywords in TASK_PATTERNS:
        if any(keyword in tab for keyword in keywords):
            return DetectedContext(likely_task=task, confidence=confidence, reason=reason)

    return DetectedContext(reason="No pattern match found")


def detect_category_from_context(task: str | None) -> str | None:
    if not task:
        return None
    task_lower = task.lower()
    for category, keywords in CATEGORY_PATTERNS:
        if any(keyword in task_lower for keyword in keywords):
            return category
    return None


def detect_context(active_tab: str, is_idle: bool) -> DetectedContext:
    detection = detect_likely_task(active_tab, is_idle)
    if not detection.likely_task:
        return detection
    return detection.model_copy(update={"category": detect_category_from_context(detection.likely_task)})
