from django import forms

from .image_processing.cell_analyzer import MAX_LEVEL


class ImageInputForm(forms.Form):
    """
    Request body of the image input API.

    Values must already have their JSON types: min_level an integer
    (default 0, report every cell), image a string.
    """
    min_level = forms.IntegerField(min_value=0, max_value=MAX_LEVEL, required=False)
    image = forms.CharField(strip=False)

    def clean_min_level(self):
        raw = self.data.get('min_level')
        if raw is not None and (isinstance(raw, bool) or not isinstance(raw, int)):
            raise forms.ValidationError('Expected an integer.')

        min_level = self.cleaned_data.get('min_level')
        return 0 if min_level is None else min_level

    def clean_image(self):
        if not isinstance(self.data.get('image'), str):
            raise forms.ValidationError('Expected a string.')
        return self.cleaned_data['image']
