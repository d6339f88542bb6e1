from interview_coach.schemas.interview import FeedbackBlock, FeedbackLine

OVERALL_IMPRESSION_HEADING = "### Overall Impression"


def _is_list_line(line: str) -> bool:
    return line.startswith("- ") or line.startswith("* ")


def classify_line(line: str, inside_highlight: bool = False) -> FeedbackLine:
    """Classify a single feedback line; '### ' is a plain paragraph inside the highlight box."""
    if line.startswith("### ") and not inside_highlight:
        return FeedbackLine(kind="h3", text=line[4:])
    if line.startswith("## "):
        return FeedbackLine(kind="h2", text=line[3:])
    if line.startswith("# "):
        return FeedbackLine(kind="h1", text=line[2:])
    if _is_list_line(line):
        return FeedbackLine(kind="item", text=line[2:])
    if line.strip() == "---":
        return FeedbackLine(kind="rule")
    return FeedbackLine(kind="paragraph", text=line)


def render_feedback(content: str) -> list[FeedbackBlock]:
    """
    Split feedback markdown into display blocks.

    Blocks are separated by blank lines. The "Overall Impression" section is
    promoted to a highlight block, blocks made only of bullet lines become
    lists, and everything else is a section of classified lines.
    """
    blocks = []
    for block in content.split("\n\n"):
        lines = block.split("\n")
        first_line = lines[0] if lines else ""

        if first_line.startswith(OVERALL_IMPRESSION_HEADING):
            heading = first_line[4:].strip()
            blocks.append(FeedbackBlock(
                kind="highlight",
                heading=heading or "Overall Impression",
                lines=[classify_line(line, inside_highlight=True) for line in lines[1:]],
            ))
            continue

        is_list_block = all(_is_list_line(line) or line.strip() == "" for line in lines)
        if is_list_block and any(_is_list_line(line) for line in lines):
            blocks.append(FeedbackBlock(
                kind="list",
                lines=[classify_line(line) for line in lines if _is_list_line(line)],
            ))
            continue

        blocks.append(FeedbackBlock(kind="section", lines=[classify_line(line) for line in lines]))
    return blocks
