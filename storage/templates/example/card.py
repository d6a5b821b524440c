"""프로필 카드: props = {name, role, skills[]}."""

from html import escape


def App(props):
    skills = "".join(f"<li>{escape(s)}</li>" for s in props.get("skills", []))
    return f"""
    <article class="card">
        <h1>{escape(props.get("name", ""))}</h1>
        <p>{escape(props.get("role", ""))}</p>
        <ul>{skills}</ul>
    </article>
    """
