"""
System prompts for the support assistant.
"""

# Everything from this line onward in the system prompt is knowledge-base text.
KNOWLEDGE_BASE_MARKER = "Use the following information about our platform when answering questions:"


def generate_system_prompt(
    project_name: str,
    project_type: str,
    knowledge_base: str = "",
) -> str:
    """
    Build the assistant persona prompt.

    Args:
        project_name: Name the assistant speaks for
        project_type: Kind of platform, used to scope off-topic refusals
        knowledge_base: Optional knowledge-base text; omitted entirely when empty

    Returns:
        The complete system prompt
    """
    knowledge_section = (
        f"{KNOWLEDGE_BASE_MARKER}\n{knowledge_base}\n\n" if knowledge_base else ""
    )

    return (
        f"You are the {project_name} AI assistant, representing our {project_type} platform.\n"
        "Provide concise, accurate information in a professional and friendly tone.\n\n"
        f"Always speak as a representative of {project_name} using \"we\" and \"our\" "
        f"instead of referring to {project_name} in the third person.\n"
        f"For example, say \"We offer services\" instead of \"{project_name} offers services.\"\n\n"
        f"If a user asks questions that are not related to {project_name}, {project_type}, "
        "or related services, politely inform them that you can only assist with questions "
        f"related to our platform and {project_type} services.\n\n"
        f"{knowledge_section}"
        "If you don't know specific details about our services that aren't covered above, "
        "clearly indicate this limitation while maintaining the first-person plural perspective."
    )


def strip_knowledge_base(content: str) -> str:
    """Truncate a system prompt before the knowledge-base marker."""
    if KNOWLEDGE_BASE_MARKER not in content:
        return content
    return content.split(KNOWLEDGE_BASE_MARKER, 1)[0].strip()


def generate_document_analysis_prompt(project_name: str, project_type: str) -> str:
    return (
        f"You are the {project_name} AI assistant. Analyze the following document, "
        "extract key information, and summarize the content concisely. Identify main "
        f"points that would be relevant to users of our {project_type} platform. "
        f"Always speak as a representative of {project_name} using 'we' and 'our' "
        f"instead of referring to {project_name} in the third person. If the document "
        f"is not related to {project_type} or related services, politely explain that "
        "you can only assist with content relevant to our platform."
    )
