"""
Prompt templates for Gemini requests.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import rubric

NAME_PROMPT_CHARS = 2000

NAME_TEMPLATE = """From the provided resume text, extract the full name of the candidate. Respond with a JSON object containing a single key 'fullName'. For example: {{"fullName": "Jane Doe"}}.

**Resume Text:**
---
{resume}
---
"""

ANALYSIS_TEMPLATE = """
# ROLE: Senior Technical Recruiter & Analyst

You are Recruit-AI, a meticulous and objective AI Recruitment Analyst. Your primary function is to perform a rigorous, evidence-based analysis of a candidate's resume against a job description. Your goal is to be critical and realistic, preventing unqualified candidates from proceeding. You must be conservative in your scoring and base every conclusion on explicit evidence found in the resume.

# CONTEXT
- **Today's Date:** {today}.
- Use this date as your reference point for all time-based evaluations. Employment or education dates that are in the future are a significant red flag indicating a lack of attention to detail.

# OBJECTIVE

Strictly follow the mandatory workflow below to analyze the provided resume against the job description and generate a JSON report.

---

**Job Description:**
```
{job_description}
```

---

**Candidate's Resume:**
```
{resume}
```

---

# MANDATORY ANALYSIS WORKFLOW

**Step 1: Deconstruct the Job Description**
Identify the core requirements and categorize them into:
- **Must-Have Skills:** Essential technologies, languages, or qualifications explicitly stated as required.
- **Nice-to-Have Skills:** Preferred but not essential skills.

**Step 2: Evidence-Based Scoring (The Rubric)**
Calculate the relevancy score on a 100-point weighted system. If evidence is not explicitly present in the resume for a requirement, award zero points for it. Be strict.

* **Must-Have Skills ({must_have} points total):** `(Number of Must-Haves Found / Total Number of Must-Haves) * {must_have}`. For example, 3 of 4 found earns {must_have_example:g} points and 0 of 4 earns {must_have_none:g}.
* **Years of Experience ({experience} points total):** Compare the required years in the core competency with the candidate's timeline and award points proportionally. If 8 years are required and the candidate has 8+, award all {experience} points; if they have 4, award {experience_example:g}.
* **Nice-to-Have Skills ({nice} points total):** `(Number of Nice-to-Haves Found / Total Number of Nice-to-Haves) * {nice}`

The **final relevancy score** is the sum of the points from these three categories. A candidate with evidence for every requirement scores {full_score:g}.

**Step 2.5: Red Flag Identification (Critical)**
Scan the resume's timeline for:
{red_flags}
List every red flag found in the `redFlags` array. If none are found, return an empty array `[]`.

**Step 3: Synthesize and Justify**
- **Summary:** A brief, 2-3 sentence executive summary of your findings.
- **Strengths & Weaknesses:** Specific points of alignment (pros) and misalignment (cons). Every point MUST be tied to evidence.
- **Recommendation:** "{strong_label}", "{consider_label}", or "{reject_label}", using this guide:
    - **{strong}-100:** {strong_label}
    - **{consider}-{strong_floor}:** {consider_label}
    - **0-{consider_floor}:** {reject_label}

**Step 4: Generate Probing Interview Questions**
Create 3-5 interview questions that directly target the identified weaknesses and gaps.

# OUTPUT FORMAT

Provide your complete analysis in the specified JSON format. Ensure all fields are populated according to the workflow.
"""


def build_name_prompt(resume_text: str) -> str:
    return NAME_TEMPLATE.format(resume=resume_text[:NAME_PROMPT_CHARS])


def build_analysis_prompt(
    resume_text: str, job_description: str, today: Optional[date] = None
) -> str:
    """
    Render the analysis prompt.

    Args:
        resume_text: Extracted resume text.
        job_description: Job description text.
        today: Reference date for timeline checks (defaults to the current date).

    Returns:
        Prompt string ready to send to the model.
    """
    today = today or date.today()
    return ANALYSIS_TEMPLATE.format(
        today=f"{today:%B} {today.day}, {today.year}",
        job_description=job_description,
        resume=resume_text,
        must_have=rubric.MUST_HAVE_POINTS,
        experience=rubric.EXPERIENCE_POINTS,
        nice=rubric.NICE_TO_HAVE_POINTS,
        red_flags="\n".join(f"- {item}" for item in rubric.RED_FLAG_HEURISTICS),
        strong=rubric.STRONG_HIRE_THRESHOLD,
        strong_floor=rubric.STRONG_HIRE_THRESHOLD - 1,
        consider=rubric.CONSIDER_THRESHOLD,
        consider_floor=rubric.CONSIDER_THRESHOLD - 1,
        strong_label=rubric.STRONG_HIRE,
        consider_label=rubric.CONSIDER,
        reject_label=rubric.REJECT,
        must_have_example=rubric.must_have_points(3, 4),
        must_have_none=rubric.must_have_points(0, 4),
        experience_example=rubric.experience_points(4, 8),
        full_score=rubric.total_score(1, 1, 1, 1, 1, 1),
    )
