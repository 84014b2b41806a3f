"""LangGraph workflow definition for one blueprint chat turn."""

from functools import partial

from langgraph.graph import StateGraph, END

from blueprint_intel.agent.nodes import (
    acknowledge_regenerate,
    answer_from_blueprint,
    classify_message,
    explain_reasoning,
    propose_edit,
)
from blueprint_intel.agent.state import ChatState
from blueprint_intel.models.enums import IntentType
from blueprint_intel.retrieval.retriever import BlueprintRetriever


def _route_after_classify(state: ChatState) -> str:
    """Route to the agent for the classified intent; question and general share QA."""
    intent = state.get("intent")
    intent_type = intent.type if intent is not None else IntentType.GENERAL

    if intent_type == IntentType.EDIT:
        return "propose_edit"
    elif intent_type == IntentType.EXPLAIN:
        return "explain"
    elif intent_type == IntentType.REGENERATE:
        return "acknowledge_regenerate"
    else:
        return "answer_question"


def build_chat_graph(retriever: BlueprintRetriever) -> StateGraph:
    """Build the chat workflow.

    Args:
        retriever: Retriever used by the question-answering node.

    Returns:
        A compiled LangGraph StateGraph.
    """
    graph = StateGraph(ChatState)

    graph.add_node("classify_intent", classify_message)
    graph.add_node("answer_question", partial(answer_from_blueprint, retriever=retriever))
    graph.add_node("propose_edit", propose_edit)
    graph.add_node("explain", explain_reasoning)
    graph.add_node("acknowledge_regenerate", acknowledge_regenerate)

    graph.set_entry_point("classify_intent")

    graph.add_conditional_edges("classify_intent", _route_after_classify)
    graph.add_edge("answer_question", END)
    graph.add_edge("propose_edit", END)
    graph.add_edge("explain", END)
    graph.add_edge("acknowledge_regenerate", END)

    return graph.compile()
