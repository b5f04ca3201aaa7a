"""
Conversation orchestrator for tool-augmented chat.

Drives one chat turn as a small state machine:

    AWAITING_MODEL_RESPONSE --ToolRequest--> TOOL_CALL_REQUESTED
        --> TOOL_EXECUTING --> AWAITING_MODEL_RESPONSE (augmented transcript)
    AWAITING_MODEL_RESPONSE --FinalText--> FINAL_RESPONSE_READY
    any model failure or timeout --> ERROR

The model is reached through the vendor-neutral ChatModel interface. Tool
rounds are capped; once the cap is reached the model gets one last call with
no tools offered and must answer with text.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Sequence

from ..errors import UpstreamError
from ..models import (
    ChatMessage,
    FinalText,
    ModelTurn,
    ToolCall,
    ToolRequest,
    ToolResponse,
    TranscriptEntry,
)
from .tools import SearchTool, ToolDescriptor


logger = logging.getLogger(__name__)

DEFAULT_MAX_TOOL_ITERATIONS = 5
DEFAULT_MAX_HISTORY_MESSAGES = 20
DEFAULT_MODEL_TIMEOUT_SECONDS = 30.0

FAILURE_MESSAGE = "Failed to process chat request"


class TurnState(str, Enum):
    """States of a single chat turn."""
    AWAITING_MODEL_RESPONSE = "awaiting_model_response"
    TOOL_CALL_REQUESTED = "tool_call_requested"
    TOOL_EXECUTING = "tool_executing"
    FINAL_RESPONSE_READY = "final_response_ready"
    ERROR = "error"


class ChatModel(Protocol):
    """Stateless chat completion backend."""

    def send_turn(
        self,
        transcript: Sequence[TranscriptEntry],
        tools: Sequence[ToolDescriptor],
        system_instruction: str,
    ) -> ModelTurn:
        ...


class ToolLoopLimitError(UpstreamError):
    """Raised when the model keeps requesting tools past the iteration cap."""


def truncate_history(messages: Sequence[ChatMessage], limit: int) -> list[ChatMessage]:
    """Keep only the most recent `limit` messages (no bound when limit <= 0)."""
    messages = list(messages)
    if limit <= 0 or len(messages) <= limit:
        return messages
    return messages[-limit:]


@dataclass
class ChatTurnResult:
    """Outcome of one chat turn."""
    state: TurnState
    message: str
    history: list[ChatMessage]
    transitions: list[TurnState] = field(default_factory=list)
    tool_calls: list[ToolCall] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state == TurnState.FINAL_RESPONSE_READY


class ChatOrchestrator:
    """Runs the model/tool loop for chat turns.

    One instance is shared across requests; all per-turn state lives in
    local variables, so concurrent turns do not interfere.
    """

    # Strict mode: answer only from corpus matches
    DATABASE_ONLY_PROMPT = """あなたは会計法令の専門家です。ユーザーの質問に対して、search_accounting_law関数で検索した法令データベースの条文のみに基づいて回答してください。

検索の進め方:
1. 質問を分解し、関連しそうな複数の検索キーワード（同義語・上位概念・関連用語を含む）を考える
2. 必要に応じてsearch_accounting_law関数を複数回呼び出し、キーワードごとに検索する
3. 特定の法令に絞り込む場合はlawIdを指定する

回答のルール:
- 回答はデータベースの検索結果に含まれる内容だけで構成すること
- 一般知識や推測で補ってはならない
- 検索しても該当する条文が見つからない場合は、「データベースに該当する情報が見つかりませんでした」と明示し、回答を控えること
- 各主張には根拠となる法令名と条文（例: 企業会計原則 第一 一般原則 三）を必ず明記すること
- 複数の検索結果を統合し、ひとつのわかりやすい回答にまとめること"""

    # Supplemented mode: corpus first, general knowledge allowed as a fallback
    SUPPLEMENTED_PROMPT = """あなたは会計法令の専門家です。ユーザーの質問に対して、search_accounting_law関数を使って関連する法令を検索し、わかりやすく説明してください。

検索の進め方:
1. 質問を分解し、関連しそうな複数の検索キーワード（同義語・上位概念・関連用語を含む）を考える
2. 必要に応じてsearch_accounting_law関数を複数回呼び出し、キーワードごとに検索する
3. 特定の法令に絞り込む場合はlawIdを指定する

回答のルール:
- データベースの検索結果を最優先の根拠として回答すること
- 検索結果を引用する場合は、法令名と条文（例: 企業会計原則 第一 一般原則 三）を明記すること
- 検索結果に該当する情報がない場合に限り、一般的な会計の知識で補足してよい。その場合は「データベース外の一般的な知識」であることを明示すること
- 複数の検索結果を統合し、ひとつのわかりやすい回答にまとめること"""

    # Appended when the tool-round cap is reached
    FINAL_ANSWER_PROMPT = """

検索回数の上限に達しました。これ以上search_accounting_law関数は呼び出さず、これまでの検索結果だけを使って回答をまとめてください。"""

    def __init__(
        self,
        model: ChatModel,
        search_tool: SearchTool,
        max_tool_iterations: int = DEFAULT_MAX_TOOL_ITERATIONS,
        max_history_messages: int = DEFAULT_MAX_HISTORY_MESSAGES,
        model_timeout_seconds: float = DEFAULT_MODEL_TIMEOUT_SECONDS,
    ):
        """Initialize the orchestrator.

        Args:
            model: Chat backend implementing `send_turn`
            search_tool: Tool adapter wrapping the search engine
            max_tool_iterations: Tool rounds allowed before forcing an answer
            max_history_messages: History window kept after each turn
            model_timeout_seconds: Upper bound for a single model call
        """
        self.model = model
        self.tools = {search_tool.name: search_tool}
        self.max_tool_iterations = max_tool_iterations
        self.max_history_messages = max_history_messages
        self.model_timeout_seconds = model_timeout_seconds

    @property
    def tool_descriptors(self) -> list[ToolDescriptor]:
        return [tool.descriptor for tool in self.tools.values()]

    def system_prompt_for(self, database_only: bool) -> str:
        return self.DATABASE_ONLY_PROMPT if database_only else self.SUPPLEMENTED_PROMPT

    def run_turn(
        self,
        message: str,
        history: Sequence[ChatMessage] = (),
        database_only: bool = False,
    ) -> ChatTurnResult:
        """Answer one user message, calling the search tool as the model asks.

        `history` should already be bounded by the caller. The returned
        history holds the user message and, on success, the final answer,
        truncated to the configured window. On failure the user message is
        still included.
        """
        prior = list(history)
        user_message = ChatMessage(role="user", content=message)
        transcript: list[TranscriptEntry] = [*prior, user_message]
        system_instruction = self.system_prompt_for(database_only)

        transitions: list[TurnState] = []
        executed: list[ToolCall] = []

        def enter(state: TurnState) -> None:
            transitions.append(state)
            logger.debug(f"[CHAT] -> {state.value}")

        iterations = 0
        try:
            while True:
                enter(TurnState.AWAITING_MODEL_RESPONSE)
                if iterations < self.max_tool_iterations:
                    turn = self._call_model(transcript, self.tool_descriptors, system_instruction)
                else:
                    logger.warning(
                        f"[CHAT] Tool iteration cap ({self.max_tool_iterations}) reached, "
                        f"requesting final answer"
                    )
                    turn = self._call_model(
                        transcript, [], system_instruction + self.FINAL_ANSWER_PROMPT
                    )
                    if isinstance(turn, ToolRequest):
                        raise ToolLoopLimitError(
                            f"Model requested tools after {self.max_tool_iterations} tool rounds"
                        )

                if isinstance(turn, FinalText):
                    enter(TurnState.FINAL_RESPONSE_READY)
                    answer = turn.text
                    break

                enter(TurnState.TOOL_CALL_REQUESTED)
                iterations += 1
                transcript.append(turn)

                enter(TurnState.TOOL_EXECUTING)
                for call in turn.calls:
                    transcript.append(self._execute(call))
                    executed.append(call)

        except Exception as e:
            enter(TurnState.ERROR)
            logger.exception(f"[CHAT] Turn failed: {e}")
            return ChatTurnResult(
                state=TurnState.ERROR,
                message=FAILURE_MESSAGE,
                history=truncate_history([*prior, user_message], self.max_history_messages),
                transitions=transitions,
                tool_calls=executed,
                error=str(e) or e.__class__.__name__,
            )

        logger.info(f"[CHAT] Answered after {len(executed)} tool calls in {iterations} rounds")
        updated = [*prior, user_message, ChatMessage(role="model", content=answer)]
        return ChatTurnResult(
            state=TurnState.FINAL_RESPONSE_READY,
            message=answer,
            history=truncate_history(updated, self.max_history_messages),
            transitions=transitions,
            tool_calls=executed,
        )

    def _call_model(
        self,
        transcript: list[TranscriptEntry],
        tools: list[ToolDescriptor],
        system_instruction: str,
    ) -> ModelTurn:
        """Send the transcript to the model, bounded by the call timeout.

        Each call gets its own worker, so the timeout covers only the model
        call and never time spent queued behind other turns. A call that
        outlives the timeout is abandoned; the worker exits once the HTTP
        timeout of the backend fires.
        """
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="chat-model")
        future = executor.submit(
            self.model.send_turn, tuple(transcript), tuple(tools), system_instruction
        )
        try:
            turn = future.result(timeout=self.model_timeout_seconds)
        except FutureTimeoutError as e:
            raise UpstreamError(
                f"Chat model did not respond within {self.model_timeout_seconds}s"
            ) from e
        finally:
            executor.shutdown(wait=False)

        if not isinstance(turn, (ToolRequest, FinalText)):
            raise UpstreamError(f"Unexpected model turn: {turn!r}")
        if isinstance(turn, ToolRequest) and not turn.calls:
            raise UpstreamError("Model requested a tool call without any calls")
        return turn

    def _execute(self, call: ToolCall) -> ToolResponse:
        tool = self.tools.get(call.name)
        if tool is None:
            logger.warning(f"[CHAT] Model requested unknown tool: {call.name}")
            return ToolResponse(name=call.name, response={"error": f"Unknown tool: {call.name}"})
        return ToolResponse(name=call.name, response=tool.invoke(call.args).to_dict())
