from enum import Enum


class AiAction(str, Enum):
    SUMMARIZE = "summarize"
    EXPLAIN = "explain"
    ANSWER = "answer"


SUMMARIZE_TEMPLATE = "Summarize the following text concisely, focusing on key takeaways:\n\n{text}"
EXPLAIN_TEMPLATE = "Explain this paragraph in simple terms for a student:\n\n{text}"
ANSWER_TEMPLATE = 'Based on the following context, answer the question: "{question}"\n\nContext:\n{text}'
EXTRACT_TEXT_PROMPT = "Extract all text from this image. Maintain the layout as much as possible."


def build_prompt(action: AiAction, text: str, question: str = "") -> str:
    """
    Fill the prompt template for an action.

    Raises:
        ValueError: If an answer is requested without a question
    """
    action = AiAction(action)
    if action is AiAction.SUMMARIZE:
        return SUMMARIZE_TEMPLATE.format(text=text)
    if action is AiAction.EXPLAIN:
        return EXPLAIN_TEMPLATE.format(text=text)
    if not question.strip():
        raise ValueError("A question is required to answer from context")
    return ANSWER_TEMPLATE.format(question=question, text=text)
