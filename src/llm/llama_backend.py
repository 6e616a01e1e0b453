from typing import Any

from .config import LLMConfig
from .parser import PACE_FIELD, REASONING_FIELD


GBNF_SCHEMA_TEMPLATE = r"""
root ::= "{" ws "\"__PACE__\"" ws ":" ws number ws "," ws "\"__REASONING__\"" ws ":" ws string ws "}"
string ::= "\"" (char)* "\""
char ::= [^"\\] | escape
escape ::= "\\" (["\\/bfnrt] | "u" hex hex hex hex)
hex ::= [0-9a-fA-F]
number ::= "0" frac? | "1" (".0" "0"*)?
frac ::= "." (digit)+
digit ::= [0-9]
ws ::= ([ \t\n\r])*
""".strip()


def build_gbnf_schema() -> str:
    return GBNF_SCHEMA_TEMPLATE.replace("__PACE__", PACE_FIELD).replace(
        "__REASONING__",
        REASONING_FIELD,
    )


class LlamaBackend:
    def __init__(self, config: LLMConfig):
        from llama_cpp import Llama, LlamaGrammar

        self._llm = Llama(
            model_path=config.model_path,
            n_threads=config.n_threads,
            n_ctx=config.n_ctx,
            n_batch=config.n_batch,
            verbose=config.verbose,
        )
        self._grammar = LlamaGrammar.from_string(build_gbnf_schema())
        self._config = config

    def complete(self, messages: list[dict[str, str]], max_tokens: int) -> str:
        response: dict[str, Any] = self._llm.create_chat_completion(
            messages=messages,
            temperature=self._config.temperature,
            top_p=self._config.top_p,
            repeat_penalty=self._config.repeat_penalty,
            max_tokens=max_tokens,
            grammar=self._grammar,
        )
        return response["choices"][0]["message"]["content"]
