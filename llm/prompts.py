from __future__ import annotations

from typing import List, Optional, Sequence

from schemas.chat import ChatMessage, ChatRole

RESUME_MARKER = "===LATEX_RESUME==="
IMPROVEMENTS_MARKER = "===IMPROVEMENTS==="
NO_EXISTING_RESUME = (
    "No existing resume content provided - create a complete professional resume "
    "based on the job description."
)

LATEX_TEMPLATE = r"""\documentclass{resume}
\usepackage[left=0.4 in,top=0.4in,right=0.4 in,bottom=0.4in]{geometry}
\newcommand{\tab}[1]{\hspace{.2667\textwidth}\rlap{#1}}
\newcommand{\itab}[1]{\hspace{0em}\rlap{#1}}

\name{[Professional Name]}
\address{[Phone Number] \\ [City, State/Country]}
\address{\href{mailto:[email]}{[email]} \\ \href{https://linkedin.com/in/[profile]}{LinkedIn} \\ \href{[portfolio-url]}{Portfolio}}

\begin{document}

\begin{rSection}{SUMMARY}
[2-3 sentence professional summary tailored to the specific job requirements]
\end{rSection}

\begin{rSection}{EDUCATION}
{\bf [Degree Name]}, [University Name] \hfill {[Graduation Year]}\\
[Major/Field of Study] \\
\end{rSection}

\begin{rSection}{SKILLS}
\begin{tabular}{ @{} >{\bfseries}l @{\hspace{6ex}} l }
Technical Skills & [Relevant technical skills from job description]\\
Programming & [Programming languages and frameworks]\\
Tools & [Development tools, software, platforms]\\
Soft Skills & [Leadership, communication, problem-solving]
\end{tabular}
\end{rSection}

\begin{rSection}{EXPERIENCE}
{\bf [Job Title]} \hfill [Start Date - End Date]\\
[Company Name] \hfill [Location] \\
\begin{itemize}
    \itemsep -3pt {}
    \item [Achievement-focused bullet point with quantifiable results]
    \item [Another achievement with specific metrics]
    \item [Third achievement relevant to the job]
\end{itemize}
\end{rSection}

\begin{rSection}{PROJECTS}
\vspace{-1.25em}
\item \textbf{[Project Name].} {[Project description with technologies used and outcomes achieved. Include live links if available.]}
\end{rSection}

\end{document}"""


GENERATION_PROMPT = """
You are an expert resume writer specializing in LaTeX resume creation. Generate a resume in LaTeX tailored to the job description below, building on the existing resume content when it is provided.

You must provide TWO parts:
1. A complete LaTeX resume document
2. A detailed analysis of improvements and suggestions

RESPONSE FORMAT (use these marker lines exactly):
{resume_marker}
[Complete LaTeX document here]
{improvements_marker}
[Detailed improvements and suggestions here]

Rules:
- If the existing resume is blank, minimal or missing, create a complete professional resume.
- Include the sections Summary, Education, Skills, Experience and Projects.
- Extract the technical skills, languages, frameworks and tools the job asks for; add the missing ones and group skills as Technical, Programming, Tools and Soft Skills.
- If there are fewer than 2-3 projects, add relevant projects that demonstrate the required skills, with technologies, measurable outcomes and links.
- Use action verbs and quantifiable achievements (%, $, numbers).
- Include ATS-friendly keywords from the job description.
- Keep bullet points concise but impactful; focus on results rather than responsibilities.
- Make sure the LaTeX compiles.

Use this exact LaTeX template structure:
{latex_template}

Job Description: {job_description}

{existing_resume}

Improvements analysis format. In the improvements part, use these headings:

SKILLS ANALYSIS:
- Skills found in the job description compared with the resume's skills
- Missing skills that should be added

PROJECTS ANALYSIS:
- Number of projects in the resume and why more may be needed
- Project ideas that showcase the job requirements

EXPERIENCE ENHANCEMENTS:
- Gaps in the work experience descriptions
- Action verbs and metrics to include

OTHER IMPROVEMENTS:
- ATS optimization, format and presentation suggestions

Generate the response in the exact format specified above.
"""


def build_generation_prompt(job_description: str, existing_resume: Optional[str] = None) -> str:
    if existing_resume:
        resume_block = f"Existing Resume Content:\n{existing_resume}"
    else:
        resume_block = NO_EXISTING_RESUME
    return GENERATION_PROMPT.format(
        resume_marker=RESUME_MARKER,
        improvements_marker=IMPROVEMENTS_MARKER,
        latex_template=LATEX_TEMPLATE,
        job_description=job_description,
        existing_resume=resume_block,
    ).strip()


def build_generation_messages(
    job_description: str, existing_resume: Optional[str], system_prompt: str
) -> List[ChatMessage]:
    return [
        ChatMessage(role=ChatRole.SYSTEM, content=system_prompt),
        ChatMessage(
            role=ChatRole.USER,
            content=build_generation_prompt(job_description, existing_resume),
        ),
    ]


def with_resume_context(question: str, resume_text: Optional[str]) -> str:
    if not resume_text:
        return question
    return f"Resume Content:\n{resume_text}\n\nUser Question: {question}"


def build_chat_messages(
    system_prompt: str,
    history: Sequence[ChatMessage],
    question: str,
    resume_text: Optional[str] = None,
) -> List[ChatMessage]:
    """Assemble one conversational turn.

    The system prompt goes first, then the prior transcript, then the new
    question, prefixed with the extracted resume text when there is one.
    """
    messages = [ChatMessage(role=ChatRole.SYSTEM, content=system_prompt)]
    messages.extend(history)
    messages.append(
        ChatMessage(role=ChatRole.USER, content=with_resume_context(question, resume_text))
    )
    return messages
