"""LangGraph workflow definitions for quiz generation and collection."""

from langgraph.graph import END, StateGraph

from quizsmith.agents.collector import request_batch, screen_batch, should_request_more
from quizsmith.agents.generator import assemble_quiz, plan_quiz, request_quiz
from quizsmith.graph.state import CollectState, GenerationState
from quizsmith.llm.client import GenerationClient


def create_generation_workflow(client: GenerationClient) -> StateGraph:
    """
    Create the workflow for generating a fresh quiz.

    The workflow follows this structure:
    1. Planner - Decides the question type mix
    2. Generator - Calls the model and recovers its JSON
    3. Coordinator - Normalizes, shuffles and builds the quiz

    Any error ends the run; nothing is retried.

    Args:
        client: Generation client the generator node calls

    Returns:
        StateGraph ready to compile
    """

    async def generator(state: GenerationState) -> dict:
        return await request_quiz(state, client)

    workflow = StateGraph(GenerationState)

    workflow.add_node("planner", plan_quiz)
    workflow.add_node("generator", generator)
    workflow.add_node("coordinator", assemble_quiz)

    workflow.set_entry_point("planner")
    workflow.add_edge("planner", "generator")
    workflow.add_edge("generator", "coordinator")
    workflow.add_edge("coordinator", END)

    return workflow


def create_collect_workflow(client: GenerationClient) -> StateGraph:
    """
    Create the workflow for collecting more questions.

    The workflow follows this structure:
    1. Request - Asks the model for a batch of new questions
    2. Screen - Normalizes and de-duplicates the batch
    3. [Conditional] Request again while short and attempts remain

    Args:
        client: Generation client the request node calls

    Returns:
        StateGraph ready to compile
    """

    async def request(state: CollectState) -> dict:
        return await request_batch(state, client)

    workflow = StateGraph(CollectState)

    workflow.add_node("request", request)
    workflow.add_node("screen", screen_batch)

    workflow.set_entry_point("request")
    workflow.add_edge("request", "screen")
    workflow.add_conditional_edges(
        "screen",
        should_request_more,
        {
            "request": "request",  # Loop back for another round
            "finish": END,
        },
    )

    return workflow


def compile_generation_workflow(client: GenerationClient):
    """Compile the generation workflow."""
    return create_generation_workflow(client).compile()


def compile_collect_workflow(client: GenerationClient):
    """Compile the collect workflow."""
    return create_collect_workflow(client).compile()
