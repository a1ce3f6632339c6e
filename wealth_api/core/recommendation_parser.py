# wealth_api/core/recommendation_parser.py
import logging
import re
from typing import List

logger = logging.getLogger(__name__)

# "1. text", "2) text", "3: text", "4- text"
NUMBERED_ITEM = re.compile(r"^[0-9]+[.):\-]\s+(.+)$")


def parse_recommendations(text: str) -> List[str]:
    """
    Extract numbered-list items from a model reply, in line order.

    When no line carries an ordinal marker the whole trimmed reply becomes a
    single recommendation. Any parsing error degrades the same way.
    """
    try:
        recommendations = []
        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue
            match = NUMBERED_ITEM.match(line)
            if match:
                recommendations.append(match.group(1).strip())

        if not recommendations:
            return [text.strip()]
        return recommendations

    except Exception as e:
        logger.warning(f"Could not parse recommendations, using raw reply: {e}")
        return [str(text)]
