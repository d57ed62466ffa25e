from tortoise import fields
from tortoise.models import Model


class Photo(Model):
    id = fields.IntField(primary_key=True, source_field="id_photo")
    path = fields.CharField(max_length=1024)
    rotation = fields.IntField(default=0)
    modified_timestamp = fields.CharField(max_length=64)

    class Meta:
        table = "photos"
