"""
Question Generation Pipeline
quizgen/generation/

Steps:
1. Prompt Builder     : topic/document text → instruction string
2. Completion Client  : Gemini (httpx) or OpenAI (SDK), single attempt
3. Normalizer         : raw text → JSON array → validated questions
4. Answer-Key Mapper  : letter/index → zero-based option index
5. Persistence        : one insertion per question, issued concurrently
"""
