from django.urls import path

from modules.gateway.views import GraphQLView

urlpatterns = [
    path("graphql", GraphQLView.as_view(), name="graphql"),
]
