import os
from typing import Optional

from prompts import SYSTEM_PROMPT


class TextGenerator:
    """Thin async completion client over the configured AI provider."""

    def __init__(self):
        self.provider = os.getenv("AI_PROVIDER", "anthropic").lower()
        self.timeout = float(os.getenv("AI_TIMEOUT_SEC", "30"))

        if self.provider == "anthropic":
            self._init_anthropic()
        elif self.provider == "gemini":
            self._init_gemini()
        elif self.provider == "openai":
            self._init_openai()
        else:
            raise ValueError(
                f"Unknown AI_PROVIDER '{self.provider}'. "
                "Set AI_PROVIDER to 'anthropic', 'openai', or 'gemini'."
            )

    # ── Provider Init ─────────────────────────────────────────────────────

    def _init_anthropic(self):
        import anthropic

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise EnvironmentError("ANTHROPIC_API_KEY is not set.")
        self.client = anthropic.AsyncAnthropic(api_key=api_key, timeout=self.timeout)
        self.model = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-6")
        print(f"  AI Provider: Anthropic | Model: {self.model}")

    def _init_gemini(self):
        import google.generativeai as genai

        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise EnvironmentError("GEMINI_API_KEY is not set.")
        genai.configure(api_key=api_key)
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.client = genai.GenerativeModel(self.model)
        print(f"  AI Provider: Gemini | Model: {self.model}")

    def _init_openai(self):
        from openai import AsyncOpenAI

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise EnvironmentError("OPENAI_API_KEY is not set.")
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=os.getenv("OPENAI_BASE_URL") or None,
            timeout=self.timeout,
        )
        self.model = os.getenv("OPENAI_MODEL", "gpt-4.1-nano")
        print(f"  AI Provider: OpenAI | Model: {self.model}")

    # ── Complete ──────────────────────────────────────────────────────────

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 400,
        system: Optional[str] = None,
        history: Optional[list[dict]] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt:     The user turn.
            max_tokens: Upper bound on the reply length.
            system:     System prompt; defaults to the assistant persona.
            history:    Earlier turns as ``{"role", "content"}`` dicts.
        """
        system = system or SYSTEM_PROMPT
        history = history or []

        if self.provider == "anthropic":
            return await self._call_anthropic(prompt, max_tokens, system, history)
        elif self.provider == "gemini":
            return await self._call_gemini(prompt, max_tokens, system, history)
        elif self.provider == "openai":
            return await self._call_openai(prompt, max_tokens, system, history)
        return ""

    async def _call_anthropic(self, prompt, max_tokens, system, history) -> str:
        message = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            system=system,
            messages=[*history, {"role": "user", "content": prompt}],
        )
        return message.content[0].text

    async def _call_gemini(self, prompt, max_tokens, system, history) -> str:
        transcript = "\n".join(f"{m['role']}: {m['content']}" for m in history)
        response = await self.client.generate_content_async(
            f"{system}\n\n{transcript}\n\n{prompt}".strip(),
            generation_config={"max_output_tokens": max_tokens},
        )
        return response.text

    async def _call_openai(self, prompt, max_tokens, system, history) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                *history,
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""
