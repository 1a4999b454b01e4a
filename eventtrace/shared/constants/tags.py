class CloudEventTags:
    """Centralised span tag keys written by Knative Eventing tracing"""

    SOURCE = "cloudevents.source"
    ID = "cloudevents.id"
    TYPE = "cloudevents.type"

    @classmethod
    def summary_keys(cls) -> list[str]:
        """Tag keys rendered on the summary line, in output order"""
        return [cls.SOURCE, cls.ID, cls.TYPE]
