import logging
import os
from typing import Optional, Tuple

import gradio as gr

from config.store import KeyringSettingsStore
from llm.client import ProviderGateway
from llm.errors import ResumeAIError
from llm.providers import current_model_info, is_configured
from llm.session import ConversationSession
from render.latex import compile_to_tempfile, export_tex, latexmk_available
from render.markdown import improvements_markdown, transcript_markdown
from resume_parser.parser import DocumentIngestionError, parse_resume
from schemas.settings import AVAILABLE_MODELS, Settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("resumeai")

APP_TITLE = "ResumeAI"

store = KeyringSettingsStore()
_gateway: Optional[ProviderGateway] = None


def _get_gateway() -> ProviderGateway:
    global _gateway
    if _gateway is None:
        _gateway = ProviderGateway()
    return _gateway


def _ensure_session(session: Optional[ConversationSession]) -> ConversationSession:
    # gr.State deep-copies its default, so sessions are created per browser tab here.
    if session is None:
        session = ConversationSession(_get_gateway(), store)
    return session


def _model_banner() -> str:
    settings = store.load()
    model, provider = current_model_info(settings)
    if not is_configured(settings):
        return f"Model: **{model}** ({provider}). No API key configured yet; open Settings."
    return f"Model: **{model}** ({provider})"


def upload_resume(file_path: Optional[str], session: Optional[ConversationSession]):
    session = _ensure_session(session)
    if not file_path:
        session.attach_resume(None)
        return session, "No resume attached."
    try:
        result = parse_resume(file_path)
    except (DocumentIngestionError, OSError) as exc:
        # The chat still works without resume content.
        logger.warning("Continuing without resume content: %s", exc)
        session.attach_resume(None)
        return session, f"Resume parsing failed: {exc} You can still use the chat."
    session.attach_resume(result.raw_text)
    return (
        session,
        f"Resume analyzed successfully! Extracted {len(result.raw_text)} characters "
        f"using {result.method}.",
    )


def send_message(message: str, session: Optional[ConversationSession]):
    session = _ensure_session(session)
    if not message or not message.strip():
        return session, transcript_markdown(session.messages), message
    try:
        session.send(message.strip())
    except ResumeAIError as exc:
        return session, transcript_markdown(session.messages) + f"\n\n_{exc}_", message
    return session, transcript_markdown(session.messages), ""


def generate_resume(
    job_description: str, session: Optional[ConversationSession]
) -> Tuple[ConversationSession, str, str, Optional[str], Optional[str], str]:
    session = _ensure_session(session)
    try:
        tailored = session.generate(job_description)
    except (ResumeAIError, ValueError) as exc:
        return session, "", "", None, None, f"Generation failed: {exc}"
    except Exception as exc:
        logger.exception("Unexpected error generating resume")
        return session, "", "", None, None, f"An error occurred: {exc}"

    notes = []
    tex_path = export_tex(tailored.document)
    pdf_path: Optional[str] = None
    if latexmk_available():
        try:
            pdf_out = compile_to_tempfile(tailored.document)
            if pdf_out:
                pdf_path = str(pdf_out)
        except Exception as exc:  # pragma: no cover - external tool
            notes.append(f"latexmk failed: {exc}")
    else:
        notes.append("latexmk not installed; PDF export disabled.")

    status = "Resume generated." + ("" if not notes else " " + " ".join(notes))
    return (
        session,
        tailored.document,
        improvements_markdown(tailored.improvements),
        str(tex_path),
        pdf_path,
        status,
    )


def save_settings(
    api_key: str,
    ai_model: str,
    system_prompt: str,
    temperature: float,
    max_tokens: float,
    auto_save: bool,
) -> Tuple[str, str]:
    try:
        settings = Settings(
            api_key=api_key,
            ai_model=ai_model,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=int(max_tokens),
            auto_save=auto_save,
        )
    except ValueError as exc:
        return f"Settings not saved: {exc}", _model_banner()
    store.save(settings)
    return "Settings saved successfully!", _model_banner()


def reset_settings():
    defaults = Settings(api_key=store.load().api_key)
    return (
        defaults.ai_model,
        defaults.system_prompt,
        defaults.temperature,
        defaults.max_tokens,
        defaults.auto_save,
    )


def clear_stored_settings():
    store.clear()
    return "", "Stored settings cleared.", _model_banner()


def _lock():
    return gr.update(interactive=False)


def _unlock():
    return gr.update(interactive=True)


def build_ui():
    settings = store.load()

    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}\nAI-powered resume analysis and tailored LaTeX resumes.")
        banner = gr.Markdown(_model_banner())
        session = gr.State(None)

        with gr.Tab("Resume Analysis"):
            resume_file = gr.File(
                label="Upload Resume (DOCX or PDF)", file_types=[".docx", ".pdf"], type="filepath"
            )
            upload_status = gr.Markdown()
            transcript = gr.Markdown(transcript_markdown(()))
            with gr.Row():
                question = gr.Textbox(
                    label="Message", placeholder="Ask about your resume...", scale=4
                )
                send_btn = gr.Button("Send", scale=1)

        with gr.Tab("Generate Tailored Resume"):
            job_description = gr.Textbox(
                label="Job Description", lines=12, placeholder="Paste the job description here"
            )
            generate_btn = gr.Button("Generate Tailored Resume")
            generate_status = gr.Markdown()
            with gr.Row():
                with gr.Column(scale=2):
                    latex_preview = gr.Code(label="LaTeX Resume", language="markdown")
                with gr.Column(scale=1):
                    improvements_panel = gr.Markdown(label="Analysis & Improvements")
            tex_download = gr.File(label="Download .tex")
            pdf_download = gr.File(label="Export PDF (requires latexmk)")

        with gr.Tab("Settings"):
            api_key = gr.Textbox(label="API Key", type="password", value=settings.api_key)
            ai_model = gr.Dropdown(
                label="AI Model",
                choices=AVAILABLE_MODELS,
                value=settings.ai_model,
                allow_custom_value=True,
            )
            system_prompt = gr.Textbox(label="System Prompt", lines=4, value=settings.system_prompt)
            with gr.Row():
                temperature = gr.Slider(
                    label="Creativity (Temperature)",
                    minimum=0,
                    maximum=2,
                    step=0.1,
                    value=settings.temperature,
                )
                max_tokens = gr.Slider(
                    label="Max Response Length",
                    minimum=100,
                    maximum=4000,
                    step=100,
                    value=settings.max_tokens,
                )
            auto_save = gr.Checkbox(label="Auto-save", value=settings.auto_save)
            with gr.Row():
                save_btn = gr.Button("Save Settings")
                reset_btn = gr.Button("Reset to Defaults")
                clear_btn = gr.Button("Clear stored settings")
            settings_status = gr.Markdown()

        resume_file.change(
            fn=upload_resume, inputs=[resume_file, session], outputs=[session, upload_status]
        )

        for trigger in (send_btn.click, question.submit):
            trigger(fn=_lock, inputs=None, outputs=send_btn).then(
                fn=send_message,
                inputs=[question, session],
                outputs=[session, transcript, question],
            ).then(fn=_unlock, inputs=None, outputs=send_btn)

        generate_btn.click(fn=_lock, inputs=None, outputs=generate_btn).then(
            fn=generate_resume,
            inputs=[job_description, session],
            outputs=[
                session,
                latex_preview,
                improvements_panel,
                tex_download,
                pdf_download,
                generate_status,
            ],
        ).then(fn=_unlock, inputs=None, outputs=generate_btn)

        save_btn.click(
            fn=save_settings,
            inputs=[api_key, ai_model, system_prompt, temperature, max_tokens, auto_save],
            outputs=[settings_status, banner],
        )
        reset_btn.click(
            fn=reset_settings,
            inputs=None,
            outputs=[ai_model, system_prompt, temperature, max_tokens, auto_save],
        )
        clear_btn.click(
            fn=clear_stored_settings, inputs=None, outputs=[api_key, settings_status, banner]
        )

    return demo


if __name__ == "__main__":
    app = build_ui()
    app.launch(
        server_name="0.0.0.0",
        server_port=int(os.getenv("PORT", "7860")),
    )
