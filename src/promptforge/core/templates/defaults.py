"""Built-in templates and the stylistic option lists offered by the UI."""

from __future__ import annotations

from promptforge.schemas.templates import PromptInputs, Template, TemplateVariable, VariableType

TONE_OPTIONS = ["Professional", "Friendly", "Humorous", "Authoritative", "Empathetic", "Formal", "Informal"]
STYLE_OPTIONS = ["Concise", "Descriptive", "Academic", "Journalistic", "Narrative", "Persuasive"]
FORMAT_OPTIONS = ["Plain Text", "Markdown", "JSON", "Bullet Points", "Numbered List", "HTML"]

DEFAULT_PERSONA = "a helpful assistant"
DEFAULT_LENGTH = "about 2-3 paragraphs"

_LINE = VariableType.SINGLE_LINE
_AREA = VariableType.MULTI_LINE


def _var(key: str, label: str, placeholder: str, type_: VariableType = _LINE) -> TemplateVariable:
    return TemplateVariable(key=key, label=label, placeholder=placeholder, type=type_)


BUILTIN_TEMPLATES: tuple[Template, ...] = (
    Template(
        id="blog-post",
        name="Blog Post Idea",
        description="Generate a blog post outline or full content.",
        category="Content Creation",
        base_prompt=(
            'Generate a blog post titled "[TITLE]" about [TOPIC]. The post should include an '
            "engaging introduction, a main body covering these key points: [KEY_POINTS], and a "
            "concluding paragraph with a clear call to action: [CALL_TO_ACTION]."
        ),
        variables=[
            _var("TITLE", "Blog Post Title", "e.g., 10 Ways AI is Revolutionizing Web Development"),
            _var("TOPIC", "Main Topic", "e.g., The impact of AI on modern web development practices"),
            _var(
                "KEY_POINTS",
                "Key Points",
                "e.g., - AI-powered code generation\n- Automated testing\n- Personalized user experiences",
                _AREA,
            ),
            _var("CALL_TO_ACTION", "Call to Action", 'e.g., "Share your thoughts in the comments below!"'),
        ],
    ),
    Template(
        id="email-draft",
        name="Email Draft",
        description="Create a professional or casual email.",
        category="Communication",
        base_prompt=(
            'Draft an email to [RECIPIENT] with the subject line "[SUBJECT]". The core message is: '
            '[MESSAGE]. Please sign off with "[SIGN_OFF]" from [SENDER_NAME].'
        ),
        variables=[
            _var("RECIPIENT", "Recipient", "e.g., The Marketing Team"),
            _var("SUBJECT", "Subject", "e.g., Q3 Marketing Campaign Kick-off"),
            _var(
                "MESSAGE",
                "Main Message",
                "Summarize the core message of the email, including any questions or required actions.",
                _AREA,
            ),
            _var("SENDER_NAME", "Sender Name", "e.g., Alex Johnson"),
            _var("SIGN_OFF", "Desired Sign-off", "e.g., Best regards, Cheers, Sincerely"),
        ],
    ),
    Template(
        id="code-generator",
        name="Code Snippet Generator",
        description="Generate code in a specific language.",
        category="Development",
        base_prompt=(
            "Write a function in [LANGUAGE] that [FUNCTION_PURPOSE]. It must adhere to these "
            "requirements: [REQUIREMENTS]. Include a brief explanation and a usage example."
        ),
        variables=[
            _var("LANGUAGE", "Programming Language", "e.g., Python, JavaScript, TypeScript"),
            _var(
                "FUNCTION_PURPOSE",
                "Function Purpose",
                "e.g., takes a list of numbers and returns the sum",
                _AREA,
            ),
            _var(
                "REQUIREMENTS",
                "Specific Requirements",
                "e.g., - Must be asynchronous\n- Handle null inputs gracefully\n- Add comments for clarity",
                _AREA,
            ),
        ],
    ),
    Template(
        id="class-generator",
        name="Class Generator",
        description="Generate a class structure in an object-oriented language.",
        category="Development",
        base_prompt=(
            "Create a class named `[CLASS_NAME]` in [LANGUAGE]. The purpose of this class is to "
            "[FUNCTION_PURPOSE]. It should have the following properties and methods, and adhere "
            "to these requirements: [REQUIREMENTS]."
        ),
        variables=[
            _var("LANGUAGE", "Programming Language", "e.g., TypeScript, Python, Java"),
            _var("CLASS_NAME", "Class Name", "e.g., User, DataProcessor"),
            _var(
                "FUNCTION_PURPOSE",
                "Purpose of the Class",
                "e.g., manage user data and authentication",
                _AREA,
            ),
            _var(
                "REQUIREMENTS",
                "Properties, Methods, and Requirements",
                "e.g.,- Properties: id, username, email\n- Methods: constructor, save(), delete()\n- Must be immutable",
                _AREA,
            ),
        ],
    ),
    Template(
        id="story-generator",
        name="Story Generator",
        description="Generate a short story script, then create voice and video.",
        category="Creative",
        base_prompt=(
            "Generate a short story script based on the following details. The story should be "
            "imaginative and suitable for a short animated video.\n\nTheme: [THEME]\n\n"
            "Characters:\n[CHARACTERS]\n\nKey Plot Points:\n[PLOT_POINTS]"
        ),
        variables=[
            _var("THEME", "Story Theme", "e.g., A magical friendship, a space adventure"),
            _var(
                "CHARACTERS",
                "Main Characters",
                "e.g., - A curious fox named Finn\n- A grumpy but wise old owl",
                _AREA,
            ),
            _var(
                "PLOT_POINTS",
                "Key Plot Points",
                "e.g., - The characters discover a hidden map\n- They overcome a challenge\n"
                "- They find a surprising treasure",
                _AREA,
            ),
        ],
    ),
    Template(
        id="social-media-post",
        name="Social Media Post",
        description="Craft a post for various social media platforms.",
        category="Content Creation",
        base_prompt=(
            "Create a social media post for [PLATFORM] about [CONTENT_IDEA]. Include a clear call "
            "to action: [CALL_TO_ACTION]. Suggest relevant hashtags like [HASHTAGS]."
        ),
        variables=[
            _var("PLATFORM", "Platform", "e.g., Twitter, LinkedIn, Instagram"),
            _var(
                "CONTENT_IDEA",
                "Content Idea",
                "e.g., Announcing a new product feature for real-time collaboration.",
                _AREA,
            ),
            _var("CALL_TO_ACTION", "Call to Action", 'e.g., "Check it out now!", "What do you think?"'),
            _var("HASHTAGS", "Example Hashtags", "e.g., #AI, #NewFeature, #Tech"),
        ],
    ),
    Template(
        id="summarize-document",
        name="Document Summarizer",
        description="Summarize a piece of text.",
        category="Productivity",
        base_prompt="Provide a summary of the following text in the form of [SUMMARY_TYPE]:\n\n[DOCUMENT_TEXT]",
        variables=[
            _var(
                "SUMMARY_TYPE",
                "Type of Summary",
                "e.g., key bullet points, a short paragraph, an executive summary",
            ),
            _var("DOCUMENT_TEXT", "Document Text", "Paste the text you want to summarize here.", _AREA),
        ],
    ),
)


def default_inputs(template: Template) -> PromptInputs:
    """Starting inputs for a freshly selected template, one empty entry per variable."""
    return PromptInputs(
        persona=DEFAULT_PERSONA,
        tone=TONE_OPTIONS[0],
        style=STYLE_OPTIONS[0],
        format=FORMAT_OPTIONS[0],
        length=DEFAULT_LENGTH,
        variables={key: "" for key in template.variable_keys},
    )
