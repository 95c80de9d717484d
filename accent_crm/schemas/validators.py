def empty_to_none(v):
    """Les champs de formulaire vides ("") deviennent None."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


def clean_tags(v):
    """Normalise une liste de tags : supprime vides et doublons, conserve l'ordre."""
    if v is None:
        return None
    if isinstance(v, str):
        v = v.split(",")
    seen: list[str] = []
    for tag in v:
        tag = str(tag or "").strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen or None


def reject_null(v):
    """Colonne NOT NULL : un null explicite est refusé (422) plutôt que d'échouer au commit."""
    if v is None:
        raise ValueError("may not be null")
    return v
