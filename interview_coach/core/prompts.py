def generate_questions_prompt(job_description: str, num_questions: int) -> str:
    """
    Generate the prompt for interview question generation.

    Args:
        job_description: The job description pasted by the user.
        num_questions: How many questions to ask for.

    Returns:
        The formatted prompt string.
    """
    return (
        f"Based on the following job description, generate {num_questions} diverse interview questions.\n"
        "The questions should cover technical skills, behavioral aspects, and situational scenarios relevant to the role.\n"
        "Return the questions as a JSON array of strings. For example: [\"Question 1?\", \"Question 2?\", \"Question 3?\"].\n\n"
        "Job Description:\n"
        "---\n"
        f"{job_description}\n"
        "---\n"
    )


def feedback_intro_prompt(job_description: str) -> str:
    """Opening part of the feedback request: coach role and the job description."""
    return (
        "You are an expert interview coach. Your primary goal is to provide ACCURATE and CONSTRUCTIVE feedback.\n"
        "Analyze the following interview session based STRICTLY on the provided job description, the interview "
        "questions, the user's transcribed spoken answers, and the video data along with its corresponding "
        "analysis guidelines.\n\n"
        "Job Description:\n"
        "---\n"
        f"{job_description}\n"
        "---\n\n"
        "Interview Transcript, Videos, and Video Analysis Guidelines:\n"
        "---\n"
    )


def feedback_entry_prompt(number: int, question: str, answer: str) -> str:
    return (
        f"\nQuestion {number}: {question}\n"
        f"User's Transcribed Spoken Answer {number}: {answer}"
    )


def video_guideline_prompt(number: int) -> str:
    return (
        f"(Video Analysis Guideline for Question {number} Video: Analyze facial expressions, eye contact, "
        "body language, perceived confidence, and engagement based on this video. Correlate these visual "
        f"observations DIRECTLY with the content of the transcribed spoken answer for Question {number}.)"
    )


def video_unavailable_prompt(number: int) -> str:
    return (
        f"(Video for Question {number} was not available or had processing issues. "
        "Base feedback for this question solely on the transcribed answer.)"
    )


def no_video_prompt(number: int) -> str:
    return (
        f"(No video provided for Question {number}. "
        "Base feedback for this question solely on the transcribed answer.)"
    )


# Score lines here must stay in sync with the regexes in services/feedback/score_parser.py
FEEDBACK_INSTRUCTIONS_PROMPT = """
---
End of Transcript & Videos.

**CRITICAL INSTRUCTIONS FOR FEEDBACK GENERATION:**
1.  **ACCURACY IS PARAMOUNT:** All feedback, especially regarding what the user said, their facial expressions, and body language, MUST be STRICTLY and EXCLUSIVELY based on the provided job description, the questions, the user's transcribed spoken answers, and the specific video analysis guidelines provided for each video.
2.  **NO FABRICATION OR ASSUMPTIONS:** DO NOT invent topics, statements, examples, or details that are not explicitly present in the user's transcribed answers. If you refer to something the user said, ensure it's a direct quote or a very close paraphrase of their actual transcribed words.
3.  **GROUNDED VIDEO ANALYSIS:** When commenting on video aspects (facial expressions, eye contact, etc.), your analysis MUST be based on the video data provided AND the "Video Analysis Guideline" given for that specific video. Connect these visual observations DIRECTLY to the content of the transcribed answer for that question.
4.  **BE SPECIFIC AND CONCRETE:** Provide concrete examples from the user's transcribed answers (using quotes or close paraphrases) and specific, observed behaviors to support ALL your points. Avoid vague generalizations.

Now, provide comprehensive feedback based on ALL the preceding information, adhering strictly to the critical instructions above.
Structure your feedback using markdown.

IMPORTANT: First, include the following scoring section, using the exact formatting shown:

**Overall Score:** [value]/100 (e.g., 75/100)

**Score Breakdown:**
- **Clarity & Conciseness (from transcript):** [score]/10
- **Relevance to Role (from transcript):** [score]/10
- **Confidence & Engagement (from video analysis - facial expression, body language, eye contact, based on video guidelines):** [score]/10
- **Facial Expression Appropriateness (from video analysis, based on video guidelines):** [score]/10
- **Technical/Behavioral Prowess (from transcript content):** [score]/10

After the scores, include these qualitative sections. ALL qualitative feedback MUST be supported by specific examples from the transcript or video analysis guidelines.

### Overall Impression
Briefly summarize the candidate's performance, reflecting the overall score. Include a summary of their overall facial expressions and non-verbal cues AS GUIDED BY THE VIDEO ANALYSIS INSTRUCTIONS, integrated with insights from the transcribed answers. Base this section ONLY on provided materials.

### Strengths
Highlight what the candidate did well, contributing to their scores. Reference specific answers (quote or paraphrase from transcript) and, if video was analyzed for that answer, corresponding positive visual cues.

### Areas for Improvement
For each question/answer/video set, provide specific, actionable advice, explaining how these areas impacted the scores. Ground every point in the transcript or video analysis.
- If a transcribed answer was weak, explain why (e.g., lacks detail, unclear, not relevant) by referencing parts of the transcript, and suggest how it could be improved.
- If video was analyzed, comment on facial expressions, body language, eye contact, and perceived confidence, linked to what was said.
- Focus on clarity, relevance to the job description, STAR method (if applicable for behavioral questions), and technical accuracy.

### Alignment with Job Description
Discuss how well the candidate's answers, skills, and overall presentation align with the requirements and responsibilities stated in the job description. Support this with direct references to the transcript and the job description.

### Actionable Advice for Future Interviews
Offer 2-3 key pieces of actionable advice the candidate can use to improve for similar roles. Each piece of advice MUST be based on specific observations from THIS interview's transcript or video analysis.

Make the feedback detailed, insightful, and helpful for the candidate's growth. DO NOT INTRODUCE EXTERNAL INFORMATION OR MAKE ASSUMPTIONS.
"""
