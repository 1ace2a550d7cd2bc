"""
Prompt builder - Constructs system prompts from modular components.

Uses a template-based system with reusable components.
"""

import re
from typing import Dict, List, Any, Optional
from dataclasses import dataclass


@dataclass
class PromptComponent:
    """Represents a reusable prompt component"""
    name: str
    content: str
    required: bool = True


class PromptBuilder:
    """
    Builds system prompts from modular components.

    Components can be:
    - Agent role and identity
    - Tool descriptions
    - Review focus areas
    - Context information
    """

    SEPARATOR = "\n\n====\n\n"

    def __init__(self):
        self.components: Dict[str, PromptComponent] = {}
        self._register_default_components()

    def _register_default_components(self):
        """Register default prompt components"""

        self.register(PromptComponent(
            name="AGENT_ROLE",
            content="""You are Lector, an expert code reviewer.

You review the pending changes in a local git repository and give feedback
that is professional, constructive, and educational. Be thorough but concise.""",
            required=True
        ))

        self.register(PromptComponent(
            name="CAPABILITIES",
            content="""## Your Capabilities

You have access to tools that allow you to:
- **get_file_changes_in_directory**: Read the git changes (file and diff) in a directory
- **generate_commit_message**: Suggest a conventional commit message from staged or unstaged changes
- **write_review_to_markdown**: Save the complete review to a markdown file""",
            required=True
        ))

        self.register(PromptComponent(
            name="REVIEW_FOCUS",
            content="""## Review Focus

For every modified file, look at:
- Code quality and best practices
- Potential bugs or issues
- Security considerations
- Performance implications
- Maintainability concerns

Quote the lines you are commenting on and suggest concrete fixes.""",
            required=True
        ))

        self.register(PromptComponent(
            name="WORKFLOW",
            content="""## Workflow

1. **Inspect** - Call get_file_changes_in_directory for the repository
2. **Review** - Write feedback for each changed file
3. **Commit message** - Call generate_commit_message and include the suggestion in your review
4. **Save** - Call write_review_to_markdown with the complete review
5. **Finish** - Reply with a short summary and no further tool calls

If there are no changes, say so and stop. Do not invent files or diffs.""",
            required=True
        ))

    def register(self, component: PromptComponent):
        """Register a prompt component"""
        self.components[component.name] = component

    def build(
        self,
        include: Optional[List[str]] = None,
        exclude: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None
    ) -> str:
        """
        Build the full system prompt.

        Args:
            include: Component names to include (None = all required)
            exclude: Component names to exclude
            context: Values for {{VARIABLE}} placeholders

        Returns:
            Complete system prompt string
        """
        if include is None:
            components_to_use = [
                comp for comp in self.components.values()
                if comp.required
            ]
        else:
            components_to_use = [
                self.components[name]
                for name in include
                if name in self.components
            ]

        if exclude:
            components_to_use = [
                comp for comp in components_to_use
                if comp.name not in exclude
            ]

        sections = []
        for component in components_to_use:
            content = component.content
            if context:
                content = self._apply_context(content, context)
            sections.append(content)

        return self.SEPARATOR.join(sections)

    def _apply_context(self, content: str, context: Dict[str, Any]) -> str:
        """Replace {{VARIABLE}} placeholders with context values"""
        def replace_var(match):
            var_name = match.group(1)
            return str(context.get(var_name, match.group(0)))

        return re.sub(r'\{\{(\w+)\}\}', replace_var, content)

    def add_context_section(self, name: str, content: str, required: bool = True):
        """Add a dynamic context section, appended after the registered components"""
        self.register(PromptComponent(
            name=name,
            content=content,
            required=required
        ))
